"""核心处理模块。

单张图片的解码、色彩模式准备和重新编码。
"""

from .compression_engine import decode_image, encode_image, process_image
from .formats import FormatProcessor, get_save_parameters, to_encoder_quality


__all__ = [
    "FormatProcessor",
    "decode_image",
    "encode_image",
    "get_save_parameters",
    "process_image",
    "to_encoder_quality",
]

"""数据模型包。

定义图片批处理相关的数据结构和模型。
"""

from .compression_result import (
    BatchSummary,
    EncodedImage,
    ExportedFile,
    calculate_compression_ratio,
    format_ratio_percent,
)
from .constants import (
    ImageFormats,
    get_format_for_mime,
    is_image_mime_type,
)
from .image_item import ImageItem, ItemStatus
from .input_file import InputFile


__all__ = [
    "BatchSummary",
    "EncodedImage",
    "ExportedFile",
    "ImageFormats",
    "ImageItem",
    "InputFile",
    "ItemStatus",
    "calculate_compression_ratio",
    "format_ratio_percent",
    "get_format_for_mime",
    "is_image_mime_type",
]

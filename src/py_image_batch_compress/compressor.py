"""图像压缩器接口。

基于核心压缩引擎的简洁接口，同时提供同步和异步调用方式。
"""

import asyncio

from .core.compression_engine import process_image
from .exceptions import ValidationError
from .models.compression_result import EncodedImage
from .utils.logging_helpers import get_logger
from .utils.message_formatter import format_validation_error


logger = get_logger()


def validate_quality(quality: float) -> float:
    """验证质量因子，必须在 (0, 1] 之间"""
    if isinstance(quality, bool) or not isinstance(quality, int | float):
        raise ValidationError(format_validation_error("quality", quality, "(0, 1]"))
    if not 0 < quality <= 1:
        raise ValidationError(format_validation_error("quality", quality, "(0, 1]"))
    return float(quality)


def normalize_quality_percent(value: int) -> float:
    """滑块的 1-100 整数转换为 0-1 质量因子"""
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 100:
        raise ValidationError(format_validation_error("quality", value, "1-100 的整数"))
    return value / 100


class ImageCompressor:
    """图像压缩器。

    无状态，可被多个条目并发调用。
    """

    def compress(self, data: bytes, mime_type: str, quality: float) -> EncodedImage:
        """同步重新编码一张图片

        Args:
            data: 原始图片字节
            mime_type: 原始 MIME 类型
            quality: 质量因子 (0, 1]

        Raises:
            ValidationError: 质量因子越界
            DecodeError: 数据无法解码
            EncodeError: 编码失败
        """
        quality = validate_quality(quality)
        return process_image(data, mime_type, quality)

    async def compress_async(
        self, data: bytes, mime_type: str, quality: float
    ) -> EncodedImage:
        """在工作线程中执行 compress，不阻塞事件循环"""
        return await asyncio.to_thread(self.compress, data, mime_type, quality)

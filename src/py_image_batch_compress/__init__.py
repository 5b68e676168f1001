"""Python 批量图像压缩库。

接收一批原始图片数据，按统一质量重新编码，提供压缩前后的大小、压缩率，
以及单张下载或打包下载。基于 Pillow 11 现代 API。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "批量图像重新编码与打包导出，基于 Pillow 11"

# 核心功能导出
from .compressor import ImageCompressor
from .engine import ArchiveExporter, BatchController, ItemEvent
from .exceptions import (
    CompressionError,
    DecodeError,
    DuplicateNameError,
    EmptyBatchError,
    EncodeError,
    ExportError,
    ImageBatchError,
    IncompleteItemError,
    NoImagesError,
    ValidationError,
)
from .models import (
    BatchSummary,
    EncodedImage,
    ExportedFile,
    ImageItem,
    InputFile,
    ItemStatus,
)
from .utils import format_file_size, setup_logging


__all__ = [
    "ArchiveExporter",
    "BatchController",
    "BatchSummary",
    "CompressionError",
    "DecodeError",
    "DuplicateNameError",
    "EmptyBatchError",
    "EncodeError",
    "EncodedImage",
    "ExportError",
    "ExportedFile",
    "ImageBatchError",
    "ImageCompressor",
    "ImageItem",
    "IncompleteItemError",
    "InputFile",
    "ItemEvent",
    "ItemStatus",
    "NoImagesError",
    "ValidationError",
    "format_file_size",
    "get_version",
    "setup_logging",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__

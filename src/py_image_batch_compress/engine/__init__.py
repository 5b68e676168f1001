"""批量处理引擎模块。

包含批量控制和压缩包导出等核心处理逻辑。
"""

from .archive import ArchiveExporter
from .batch import BatchController, ItemEvent


__all__ = [
    "ArchiveExporter",
    "BatchController",
    "ItemEvent",
]

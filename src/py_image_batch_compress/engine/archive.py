"""压缩包导出模块。

收集每个条目当前的压缩结果，生成单个 zip 文件或单张图片的下载文件。
"""

import asyncio
import zipfile
from collections.abc import Sequence
from io import BytesIO

from ..config import get_config
from ..exceptions import DuplicateNameError, EmptyBatchError, IncompleteItemError
from ..models.compression_result import ExportedFile
from ..models.image_item import ImageItem
from ..utils.logging_helpers import get_logger
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()


class ArchiveExporter:
    """压缩包导出器

    导出前检查整个批次，任何条目不满足条件都不会生成部分压缩包。
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        """初始化导出器

        Args:
            compression: zipfile 压缩方式
        """
        self.compression = compression

    def export(self, items: Sequence[ImageItem]) -> ExportedFile:
        """将所有条目的压缩结果打包

        Raises:
            EmptyBatchError: 没有条目
            IncompleteItemError: 有条目尚未完成首次压缩
            DuplicateNameError: 导出文件名重复
        """
        return self._build_archive(self._collect_entries(items))

    async def export_async(self, items: Sequence[ImageItem]) -> ExportedFile:
        """在工作线程中打包

        条目的校验和数据收集在调用方的事件循环中完成，之后的改动不影响本次导出。
        """
        entries = self._collect_entries(items)
        return await asyncio.to_thread(self._build_archive, entries)

    def _build_archive(self, entries: list[tuple[str, bytes]]) -> ExportedFile:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", self.compression) as archive:
            for name, data in entries:
                archive.writestr(name, data)

        exported = ExportedFile(
            file_name=FileNamingStrategy.archive_name(),
            data=buffer.getvalue(),
            mime_type=get_config().export.ARCHIVE_MIME_TYPE,
        )
        logger.info(
            f"导出压缩包 {exported.file_name}: {len(entries)} 个文件, "
            f"{exported.get_size_human()}"
        )
        return exported

    def export_item(self, item: ImageItem) -> ExportedFile:
        """单张图片下载，不经过压缩包

        Raises:
            IncompleteItemError: 条目尚未完成首次压缩
        """
        if item.compressed_bytes is None:
            raise IncompleteItemError(item.file_name, item.id)

        return ExportedFile(
            file_name=item.export_name,
            data=item.compressed_bytes,
            mime_type=item.mime_type,
        )

    def _collect_entries(
        self, items: Sequence[ImageItem]
    ) -> list[tuple[str, bytes]]:
        if not items:
            raise EmptyBatchError()

        entries: list[tuple[str, bytes]] = []
        for item in items:
            if item.compressed_bytes is None:
                logger.warning(f"导出中止，图片尚未压缩完成: {item.file_name}")
                raise IncompleteItemError(item.file_name, item.id)
            entries.append((item.export_name, item.compressed_bytes))

        duplicates = FileNamingStrategy.find_duplicates(name for name, _ in entries)
        if duplicates:
            logger.warning(f"导出中止，文件名重复: {', '.join(duplicates)}")
            raise DuplicateNameError(duplicates[0])

        return entries

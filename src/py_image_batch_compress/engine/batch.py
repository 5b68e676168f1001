"""批量控制器模块。

持有当前批次的所有图片条目，负责接收文件、分派压缩任务，
并在全局质量变化时重新压缩全部条目。
"""

import asyncio
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from ..compressor import ImageCompressor, normalize_quality_percent, validate_quality
from ..config import get_config
from ..exceptions import ErrorHandler, NoImagesError
from ..models.compression_result import BatchSummary, EncodedImage, ExportedFile
from ..models.image_item import ImageItem, ItemStatus
from ..models.constants import is_image_mime_type
from ..models.input_file import InputFile
from ..utils.logging_helpers import get_logger
from .archive import ArchiveExporter


logger = get_logger()


class ItemEvent(str, Enum):
    """通知给订阅者的条目事件"""

    ADDED = "added"
    UPDATED = "updated"
    FAILED = "failed"


ItemListener = Callable[[ImageItem, ItemEvent], Any]


class BatchController:
    """批量压缩控制器

    所有条目的写入都在事件循环线程中经由本类完成。
    每次分派都会为条目分配递增的序号，只有最近发出的请求的结果才会生效，
    先发出但后完成的旧结果被丢弃，不会覆盖新结果。
    """

    def __init__(
        self,
        compressor: ImageCompressor | None = None,
        quality: float | None = None,
        max_workers: int | None = None,
        exporter: ArchiveExporter | None = None,
    ):
        """初始化控制器

        Args:
            compressor: 压缩器实例
            quality: 初始质量因子 (0, 1]，默认使用配置中的 DEFAULT_QUALITY
            max_workers: 同时进行的压缩任务上限
            exporter: 导出器实例
        """
        app_config = get_config()
        self.compressor = compressor or ImageCompressor()
        self.exporter = exporter or ArchiveExporter()
        self._quality = validate_quality(
            quality if quality is not None else app_config.default_quality_factor
        )
        self.max_workers = max_workers or app_config.compression.MAX_WORKERS
        self._semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None
        self._items: dict[str, ImageItem] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._listeners: list[ItemListener] = []

        logger.debug(
            f"初始化批量控制器: quality={self._quality}, max_workers={self.max_workers}"
        )

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[ImageItem]:
        """按加入顺序排列的条目"""
        return list(self._items.values())

    @property
    def quality(self) -> float:
        return self._quality

    @property
    def quality_percent(self) -> int:
        return round(self._quality * 100)

    @property
    def pending_count(self) -> int:
        """仍在进行的压缩任务数"""
        return len(self._tasks)

    def get_item(self, item_id: str) -> ImageItem:
        """按 id 获取条目

        Raises:
            KeyError: 条目不存在
        """
        return self._items[item_id]

    def __len__(self) -> int:
        return len(self._items)

    def summary(self) -> BatchSummary:
        """当前批次的统计信息"""
        items = self.items
        ready = [i for i in items if i.compressed_bytes is not None]
        return BatchSummary(
            total_count=len(items),
            ready_count=sum(1 for i in items if i.status == ItemStatus.READY),
            pending_count=sum(
                1
                for i in items
                if i.status in (ItemStatus.PENDING, ItemStatus.PROCESSING)
            ),
            failed_count=sum(1 for i in items if i.status == ItemStatus.FAILED),
            total_original_size=sum(i.original_size for i in ready),
            total_compressed_size=sum(len(i.compressed_bytes or b"") for i in ready),
        )

    # ------------------------------------------------------------------
    # 订阅
    # ------------------------------------------------------------------

    def subscribe(self, listener: ItemListener) -> Callable[[], None]:
        """订阅条目变化，返回取消订阅的函数"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, item: ImageItem, event: ItemEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(item, event)
            except Exception as e:
                logger.error(f"条目监听器执行失败 [{item.file_name}] {event.value}: {e}")

    # ------------------------------------------------------------------
    # 写入操作
    # ------------------------------------------------------------------

    def ingest(
        self, files: Iterable[InputFile | tuple[bytes, str, str]]
    ) -> list[ImageItem]:
        """接收一批文件，为每个图片文件创建条目并开始压缩

        必须在运行中的事件循环内调用；压缩在后台进行，本方法立即返回。

        Args:
            files: InputFile 或 ``(bytes, 文件名, MIME)`` 元组序列

        Returns:
            list[ImageItem]: 新建的条目，顺序与输入一致

        Raises:
            NoImagesError: 输入中没有图片文件
            ValidationError: 图片条目的格式不正确
        """
        # 没有运行中的事件循环时尽早失败，避免留下无任务的条目
        asyncio.get_running_loop()

        entries = list(files)
        # 先按声明的类型过滤，非图片条目不做校验
        images = [
            InputFile.coerce(f)
            for f in entries
            if is_image_mime_type(InputFile.declared_mime_type(f))
        ]
        skipped = len(entries) - len(images)
        if skipped:
            logger.info(f"跳过 {skipped} 个非图片文件")

        if not images:
            raise NoImagesError()

        created: list[ImageItem] = []
        for input_file in images:
            item = ImageItem(
                file_name=input_file.file_name,
                mime_type=input_file.mime_type,
                original_bytes=input_file.data,
            )
            self._items[item.id] = item
            created.append(item)
            logger.debug(
                f"添加图片: {item.file_name} ({item.mime_type}, {item.original_size} bytes)"
            )
            self._notify(item, ItemEvent.ADDED)
            self._dispatch(item, self._quality)

        logger.info(f"接收 {len(created)} 张图片，质量 {self.quality_percent}%")
        return created

    def set_quality(self, quality: float) -> None:
        """修改全局质量并重新压缩所有条目，不等待完成

        必须在运行中的事件循环内调用，否则质量和条目都保持不变。
        """
        asyncio.get_running_loop()

        self._quality = validate_quality(quality)
        logger.info(
            f"质量调整为 {self.quality_percent}%，重新压缩 {len(self._items)} 张图片"
        )
        for item in self._items.values():
            self._dispatch(item, self._quality)

    def set_quality_percent(self, value: int) -> None:
        """滑块入口：1-100 的整数"""
        self.set_quality(normalize_quality_percent(value))

    async def wait_until_idle(self) -> None:
        """等待所有已分派的压缩任务完成（包括等待期间新分派的任务）"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ------------------------------------------------------------------
    # 导出
    # ------------------------------------------------------------------

    def download_item(self, item_id: str) -> ExportedFile:
        """单张图片下载，直接返回当前压缩结果"""
        return self.exporter.export_item(self.get_item(item_id))

    def export_archive(self) -> ExportedFile:
        """将所有条目打包为一个压缩包"""
        return self.exporter.export(self.items)

    async def export_archive_async(self) -> ExportedFile:
        """在工作线程中打包"""
        return await self.exporter.export_async(self.items)

    # ------------------------------------------------------------------
    # 任务分派
    # ------------------------------------------------------------------

    def _dispatch(self, item: ImageItem, quality: float) -> None:
        sequence = item.begin_compression(quality)
        task = asyncio.get_running_loop().create_task(
            self._run_compression(item.id, sequence, quality),
            name=f"compress-{item.id}-{sequence}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _get_semaphore(self) -> asyncio.Semaphore:
        # 信号量绑定到首次等待它的事件循环，换了循环就重新创建
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_workers)
            self._semaphore_loop = loop
        return self._semaphore

    async def _run_compression(
        self, item_id: str, sequence: int, quality: float
    ) -> None:
        item = self._items[item_id]
        try:
            async with self._get_semaphore():
                result = await self.compressor.compress_async(
                    item.original_bytes, item.mime_type, quality
                )
        except Exception as e:
            message = ErrorHandler.handle_compression_error(e, item.file_name)
            if item.record_failure(sequence, message):
                self._notify(item, ItemEvent.FAILED)
            return

        self._apply_result(item, sequence, quality, result)

    def _apply_result(
        self, item: ImageItem, sequence: int, quality: float, result: EncodedImage
    ) -> None:
        if not item.apply_result(sequence, result, quality):
            logger.debug(
                f"丢弃过期的压缩结果: {item.file_name} #{sequence} "
                f"(最新 #{item.latest_sequence})"
            )
            return

        logger.debug(
            f"压缩完成: {item.file_name} q={quality} {result.get_summary()}"
        )
        self._notify(item, ItemEvent.UPDATED)

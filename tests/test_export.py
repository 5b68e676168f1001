"""压缩包导出测试。"""

import zipfile
from io import BytesIO

import pytest

from py_image_batch_compress.engine import ArchiveExporter
from py_image_batch_compress.exceptions import (
    DuplicateNameError,
    EmptyBatchError,
    ExportError,
    IncompleteItemError,
)
from py_image_batch_compress.models import ImageItem


class TestArchiveExporter:
    """导出器测试"""

    @pytest.fixture
    def exporter(self):
        return ArchiveExporter()

    def test_empty_batch(self, exporter):
        with pytest.raises(EmptyBatchError):
            exporter.export([])

    def test_incomplete_item(self, exporter, make_ready_item):
        pending = ImageItem(
            file_name="slow.png", mime_type="image/png", original_bytes=b"data"
        )
        with pytest.raises(IncompleteItemError) as exc_info:
            exporter.export([make_ready_item("fast.png"), pending])

        assert exc_info.value.file_name == "slow.png"
        assert exc_info.value.item_id == pending.id
        assert isinstance(exc_info.value, ExportError)

    def test_archive_contents(self, exporter, make_ready_item):
        items = [
            make_ready_item("a.png", compressed=b"AAA"),
            make_ready_item("b.jpg", compressed=b"BBBB"),
        ]
        exported = exporter.export(items)

        assert exported.file_name == "compressed_images.zip"
        assert exported.mime_type == "application/zip"
        assert exported.size == len(exported.data)
        with zipfile.ZipFile(BytesIO(exported.data)) as archive:
            assert archive.namelist() == ["compressed_a.png", "compressed_b.jpg"]
            assert archive.read("compressed_a.png") == b"AAA"
            assert archive.read("compressed_b.jpg") == b"BBBB"

    def test_duplicate_names_abort_export(self, exporter, make_ready_item):
        items = [make_ready_item("same.png"), make_ready_item("same.png")]
        with pytest.raises(DuplicateNameError) as exc_info:
            exporter.export(items)
        assert exc_info.value.file_name == "compressed_same.png"

    def test_export_single_item(self, exporter, make_ready_item):
        item = make_ready_item("one.png", compressed=b"single")
        exported = exporter.export_item(item)

        assert exported.file_name == "compressed_one.png"
        assert exported.data == b"single"
        assert exported.mime_type == "image/png"

    def test_export_single_incomplete(self, exporter):
        item = ImageItem(file_name="x.png", mime_type="image/png", original_bytes=b"x")
        with pytest.raises(IncompleteItemError):
            exporter.export_item(item)

    def test_stored_compression(self, make_ready_item):
        exporter = ArchiveExporter(compression=zipfile.ZIP_STORED)
        exported = exporter.export([make_ready_item("a.png", compressed=b"A" * 100)])
        with zipfile.ZipFile(BytesIO(exported.data)) as archive:
            info = archive.getinfo("compressed_a.png")
            assert info.compress_type == zipfile.ZIP_STORED

    @pytest.mark.asyncio
    async def test_export_async(self, exporter, make_ready_item):
        exported = await exporter.export_async([make_ready_item("a.png")])
        with zipfile.ZipFile(BytesIO(exported.data)) as archive:
            assert archive.namelist() == ["compressed_a.png"]

    @pytest.mark.asyncio
    async def test_export_async_validates_before_work(self, exporter):
        with pytest.raises(EmptyBatchError):
            await exporter.export_async([])

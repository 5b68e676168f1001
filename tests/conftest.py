"""测试配置文件。

提供测试所需的fixtures和配置，测试图片全部在内存中生成。
"""

import asyncio
from io import BytesIO

import pytest
from PIL import Image, ImageDraw
from PIL.PngImagePlugin import PngInfo

from py_image_batch_compress.config import reset_config
from py_image_batch_compress.exceptions import EncodeError
from py_image_batch_compress.models import EncodedImage, ImageItem


def encode(img: Image.Image, format: str, **params) -> bytes:
    """将图片编码为字节"""
    buffer = BytesIO()
    img.save(buffer, format=format, **params)
    return buffer.getvalue()


def create_graphic_image(size: tuple[int, int] = (400, 300)) -> Image.Image:
    """创建带色块的简单图形"""
    img = Image.new("RGB", size, color="white")
    draw = ImageDraw.Draw(img)
    width, height = size
    for i in range(30):
        x, y = (i * 20) % width, (i * 16) % height
        color = (i * 5 % 256, i * 7 % 256, i * 11 % 256)
        draw.rectangle([x, y, x + 50, y + 40], fill=color)
    return img


def create_photo_like_image(size: tuple[int, int] = (320, 240)) -> Image.Image:
    """创建带噪声和渐变的照片类图片，有损编码对其质量敏感"""
    red = Image.effect_noise(size, 60)
    green = Image.linear_gradient("L").resize(size)
    blue = Image.radial_gradient("L").resize(size)
    return Image.merge("RGB", (red, green, blue))


def create_png_of_exact_size(target_size: int) -> bytes:
    """生成恰好 target_size 字节的 PNG，用 tEXt 块补足长度"""
    img = Image.new("RGB", (8, 8), color=(200, 30, 30))
    base = encode(img, "PNG")
    # tEXt 块开销：长度 4 + 类型 4 + 关键字 "pad" 3 + 分隔符 1 + CRC 4
    padding = target_size - len(base) - 16
    assert padding > 0

    info = PngInfo()
    info.add_text("pad", "x" * padding)
    data = encode(img, "PNG", pnginfo=info)
    assert len(data) == target_size
    return data


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """每个测试使用干净的全局配置"""
    for name in (
        "PIC_DEFAULT_QUALITY",
        "PIC_MAX_WORKERS",
        "PIC_LOG_LEVEL",
        "PIC_ENABLE_FILE_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def png_bytes() -> bytes:
    return encode(create_graphic_image(), "PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode(create_photo_like_image(), "JPEG", quality=95)


@pytest.fixture
def webp_bytes() -> bytes:
    return encode(create_photo_like_image(), "WEBP", quality=95)


@pytest.fixture
def transparent_png_bytes() -> bytes:
    img = Image.new("RGBA", (200, 200), color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    for i in range(5):
        x, y = i * 30, i * 30
        draw.ellipse([x, y, x + 80, y + 80], fill=(255 - i * 40, 100, i * 50, 180))
    return encode(img, "PNG")


@pytest.fixture
def png_1000_bytes() -> bytes:
    return create_png_of_exact_size(1000)


class DelayedCompressor:
    """可控延迟的假压缩器

    输出内容记录了请求的质量，便于断言最终生效的是哪一次请求。
    """

    def __init__(
        self,
        delays: dict[float, float] | None = None,
        failing_data: set[bytes] | None = None,
    ):
        self.delays = delays or {}
        self.failing_data = failing_data or set()
        self.calls: list[float] = []

    async def compress_async(
        self, data: bytes, mime_type: str, quality: float
    ) -> EncodedImage:
        self.calls.append(quality)
        await asyncio.sleep(self.delays.get(quality, 0))
        if data in self.failing_data:
            raise EncodeError("模拟编码失败")
        return EncodedImage(
            encoded_bytes=f"q={quality}".encode(),
            original_size=len(data),
            mime_type=mime_type,
            format_used="PNG",
            quality_used=round(quality * 100),
            dimensions=(1, 1),
        )


@pytest.fixture
def delayed_compressor():
    """创建假压缩器的工厂"""
    return DelayedCompressor


@pytest.fixture
def make_ready_item():
    """创建已完成压缩的条目"""

    def factory(
        file_name: str = "photo.png",
        original: bytes = b"original-bytes",
        compressed: bytes = b"compressed",
        quality: float = 0.8,
    ) -> ImageItem:
        item = ImageItem(
            file_name=file_name, mime_type="image/png", original_bytes=original
        )
        result = EncodedImage(
            encoded_bytes=compressed,
            original_size=len(original),
            mime_type="image/png",
            format_used="PNG",
            quality_used=None,
            dimensions=(1, 1),
        )
        item.apply_result(item.begin_compression(quality), result, quality)
        return item

    return factory

"""压缩引擎模块。

解码一段图片数据并按指定质量重新编码，不读写任何共享状态，
因此可以在工作线程中并发调用。
"""

from io import BytesIO

from PIL import Image, ImageOps

from ..exceptions import DecodeError, EncodeError, handle_image_errors
from ..models.compression_result import EncodedImage
from ..models.constants import ImageFormats
from ..utils.logging_helpers import get_logger
from .formats import FormatProcessor, get_save_parameters


logger = get_logger()

_format_processor = FormatProcessor()


def process_image(data: bytes, mime_type: str, quality: float) -> EncodedImage:
    """重新编码单张图片。

    Args:
        data: 原始图片字节
        mime_type: 原始 MIME 类型，输出沿用该类型
        quality: 质量因子，取值 (0, 1]

    Returns:
        EncodedImage: 编码结果

    Raises:
        DecodeError: 数据无法解码
        EncodeError: 编码失败或没有输出
    """
    img = decode_image(data)
    try:
        target_format = _resolve_target_format(mime_type)
        encoded, quality_used = encode_image(img, target_format, quality)
        dimensions = img.size
    finally:
        img.close()

    logger.debug(
        f"重新编码完成: {target_format} q={quality_used} "
        f"{len(data)} -> {len(encoded)} bytes"
    )

    return EncodedImage(
        encoded_bytes=encoded,
        original_size=len(data),
        mime_type=mime_type,
        format_used=target_format,
        quality_used=quality_used,
        dimensions=dimensions,
    )


@handle_image_errors("图像解码")
def decode_image(data: bytes) -> Image.Image:
    """解码图片并应用 EXIF 方向，返回完整加载的图像"""
    if not data:
        raise DecodeError("图片数据为空")

    with Image.open(BytesIO(data)) as img:
        img.load()
        # 与浏览器绘制到 canvas 时一致：按 EXIF 方向摆正
        transposed = ImageOps.exif_transpose(img)
        if transposed is img:
            return img.copy()
        return transposed


def encode_image(
    img: Image.Image, target_format: str, quality: float
) -> tuple[bytes, int | None]:
    """按目标格式编码图像

    Returns:
        tuple: (编码后的字节, 实际使用的质量值)
    """
    prepared = _format_processor.prepare_for_format(img, target_format)
    save_params, quality_used = get_save_parameters(target_format, quality)

    buffer = BytesIO()
    try:
        prepared.save(buffer, format=target_format, **save_params)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise EncodeError(f"{target_format} 编码失败: {e}") from e
    finally:
        if prepared is not img:
            prepared.close()

    encoded = buffer.getvalue()
    if not encoded:
        raise EncodeError(f"{target_format} 编码器没有产生输出")
    return encoded, quality_used


def _resolve_target_format(mime_type: str) -> str:
    """MIME 类型对应的可写格式，找不到编码器时抛出 EncodeError"""
    target_format = ImageFormats.get_format_for_mime(mime_type)
    if target_format is None:
        raise EncodeError(f"没有与 {mime_type} 对应的编码器")
    if not ImageFormats.can_encode(target_format):
        raise EncodeError(f"Pillow 不支持写入 {target_format} 格式")
    return target_format

"""图像处理相关常量定义。

基于 Pillow 动态能力的图像格式管理，避免硬编码重复。
"""

from pathlib import PurePath
from typing import Final

from PIL import Image


class ImageFormats:
    """基于 Pillow 的动态图像格式管理"""

    # 浏览器中常见但 Pillow 未登记的 MIME 别名
    MIME_ALIASES: Final[dict[str, str]] = {
        "image/jpg": "JPEG",
        "image/pjpeg": "JPEG",
        "image/x-png": "PNG",
        "image/x-ms-bmp": "BMP",
        "image/x-bmp": "BMP",
        "image/x-icon": "ICO",
        "image/vnd.microsoft.icon": "ICO",
    }

    IMAGE_MIME_PREFIX: Final[str] = "image/"

    @classmethod
    def _mime_registry(cls) -> dict[str, str]:
        """MIME -> Pillow 格式名 的映射"""
        # 插件延迟加载，init 之后 Image.MIME 才完整
        Image.init()
        registry = {mime.lower(): fmt.upper() for fmt, mime in Image.MIME.items()}
        registry.update(cls.MIME_ALIASES)
        return registry

    @classmethod
    def get_format_for_mime(cls, mime_type: str) -> str | None:
        """根据 MIME 类型获取 Pillow 格式名，未知时返回 None"""
        normalized = mime_type.split(";", 1)[0].strip().lower()
        return cls._mime_registry().get(normalized)

    @classmethod
    def can_encode(cls, format_name: str) -> bool:
        """Pillow 是否有该格式的编码器"""
        Image.init()
        return format_name.upper() in Image.SAVE

    @classmethod
    def get_mime_type_for_extension(cls, file_name: str | PurePath) -> str:
        """按扩展名推断 MIME 类型，未知时返回空字符串

        与浏览器为文件选择框填充的 ``File.type`` 行为一致。
        """
        suffix = PurePath(file_name).suffix.lower()
        format_name = Image.registered_extensions().get(suffix)
        if not format_name:
            return ""
        return Image.MIME.get(format_name, f"image/{format_name.lower()}")

    @classmethod
    def is_image_mime_type(cls, mime_type: str | None) -> bool:
        """声明的类型是否为图片"""
        return bool(mime_type) and mime_type.lower().startswith(cls.IMAGE_MIME_PREFIX)


# 便捷访问函数
def get_format_for_mime(mime_type: str) -> str | None:
    """获取 MIME 类型对应的 Pillow 格式名"""
    return ImageFormats.get_format_for_mime(mime_type)


def is_image_mime_type(mime_type: str | None) -> bool:
    """检查 MIME 类型是否以 image/ 开头"""
    return ImageFormats.is_image_mime_type(mime_type)

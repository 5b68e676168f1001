"""格式处理器模块。

为目标格式准备色彩模式，并生成各格式的保存参数。
"""

import logging
from typing import Any

from PIL import Image


logger = logging.getLogger(__name__)

# JPEG 没有透明通道，透明区域铺在白色背景上
JPEG_BACKGROUND: tuple[int, int, int] = (255, 255, 255)


class FormatProcessor:
    """格式处理器 - 保证解码后的图像可以被目标编码器接受"""

    def prepare_for_format(self, img: Image.Image, target_format: str) -> Image.Image:
        """为目标格式准备图片

        Args:
            img: PIL图片对象
            target_format: 目标 Pillow 格式名

        Returns:
            Image.Image: 处理后的图片对象
        """
        match target_format:
            case "JPEG":
                return self._prepare_for_jpeg(img)
            case "PNG":
                return self._prepare_for_png(img)
            case "WEBP" | "AVIF":
                return self._prepare_for_rgb_family(img)
            case _:
                if img.mode == "CMYK":
                    return img.convert("RGB")
                return img

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """为JPEG格式准备图片，透明图像合成到背景色上"""
        if img.mode == "P":
            # 调色板模式：有透明色时走 alpha 合成
            if "transparency" not in img.info:
                return img.convert("RGB")
            img = img.convert("RGBA")

        if img.mode in ("RGBA", "LA", "PA"):
            img = img.convert("RGBA")
            background = Image.new("RGB", img.size, JPEG_BACKGROUND)
            background.paste(img, mask=img.split()[-1])
            return background

        if img.mode in ("RGB", "L"):
            return img

        # CMYK、1 位及其他模式统一转换为 RGB
        return img.convert("RGB")

    def _prepare_for_png(self, img: Image.Image) -> Image.Image:
        """为PNG格式准备图片"""
        if img.mode == "CMYK":
            return img.convert("RGB")
        # 其他模式保持不变，PNG都支持
        return img

    def _prepare_for_rgb_family(self, img: Image.Image) -> Image.Image:
        """为 WebP/AVIF 准备图片，二者只接受 RGB 和 RGBA"""
        if img.mode in ("RGB", "RGBA"):
            return img
        if img.mode in ("P", "PA"):
            # 调色板模式，检查是否有透明度
            if img.mode == "PA" or "transparency" in img.info:
                return img.convert("RGBA")
            return img.convert("RGB")
        if img.mode == "LA":
            return img.convert("RGBA")
        return img.convert("RGB")


def to_encoder_quality(quality: float) -> int:
    """质量因子（0-1]映射到 Pillow 的 1-100"""
    return max(1, min(100, round(quality * 100)))


def get_save_parameters(
    format_name: str, quality: float
) -> tuple[dict[str, Any], int | None]:
    """获取保存参数

    Returns:
        tuple: (保存参数字典, 实际使用的质量值；无质量参数的格式为 None)
    """
    encoder_quality = to_encoder_quality(quality)

    match format_name:
        case "JPEG":
            return get_jpeg_params(encoder_quality), encoder_quality
        case "WEBP":
            return get_webp_params(encoder_quality), encoder_quality
        case "AVIF":
            return get_avif_params(encoder_quality), encoder_quality
        case "PNG":
            logger.debug("PNG 没有质量参数，使用无损压缩")
            return {"optimize": True}, None
        case _:
            return {}, None


def get_jpeg_params(quality: int) -> dict[str, Any]:
    """获取JPEG压缩参数

    - optimize: 额外处理以找到最优编码设置
    - subsampling: 色度子采样，影响质量和文件大小
    """
    params: dict[str, Any] = {
        "quality": quality,
        "optimize": True,
    }

    if quality >= 85:
        params["subsampling"] = 1  # "4:2:2" - 水平子采样
    else:
        params["subsampling"] = 2  # "4:2:0" - 标准子采样，最佳压缩

    return params


def get_webp_params(quality: int) -> dict[str, Any]:
    """获取WebP压缩参数

    - method：0=快速，6=最慢但最佳压缩
    - alpha_quality：控制透明通道质量，100为无损
    """
    params: dict[str, Any] = {
        "quality": quality,
        "method": 6,
    }

    if quality >= 85:
        params["alpha_quality"] = 100  # 透明通道无损
    elif quality >= 70:
        params["alpha_quality"] = min(100, quality + 10)
    else:
        params["alpha_quality"] = quality

    return params


def get_avif_params(quality: int) -> dict[str, Any]:
    """获取AVIF压缩参数"""
    params: dict[str, Any] = {"quality": quality}

    # 根据质量调整速度参数 (0=最慢最佳, 10=最快)
    if quality >= 90:
        params["speed"] = 2
    elif quality >= 70:
        params["speed"] = 4
    else:
        params["speed"] = 6

    return params

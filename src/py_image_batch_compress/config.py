"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CompressionDefaults:
    """压缩相关的默认配置"""

    # 质量设置 - 对应滑块的初始值（1-100）
    DEFAULT_QUALITY: int = 80
    MIN_QUALITY: int = 1
    MAX_QUALITY: int = 100

    # 并发设置
    MAX_WORKERS: int = 4


@dataclass(frozen=True)
class ExportDefaults:
    """导出相关的默认配置"""

    EXPORT_PREFIX: str = "compressed_"
    ARCHIVE_NAME: str = "compressed_images.zip"
    ARCHIVE_MIME_TYPE: str = "application/zip"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_image_batch_compress.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.compression = CompressionDefaults()
        self.export = ExportDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 压缩配置
        if default_quality := os.getenv("PIC_DEFAULT_QUALITY"):
            quality = max(
                self.compression.MIN_QUALITY,
                min(self.compression.MAX_QUALITY, int(default_quality)),
            )
            object.__setattr__(self.compression, "DEFAULT_QUALITY", quality)

        if max_workers := os.getenv("PIC_MAX_WORKERS"):
            object.__setattr__(
                self.compression, "MAX_WORKERS", max(1, int(max_workers))
            )

        # 日志配置
        if log_level := os.getenv("PIC_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("PIC_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )

    @property
    def default_quality_factor(self) -> float:
        """默认质量因子（0-1）"""
        return self.compression.DEFAULT_QUALITY / self.compression.MAX_QUALITY


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()

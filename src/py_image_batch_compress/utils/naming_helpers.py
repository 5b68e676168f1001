"""文件命名工具模块。

提供统一的导出文件命名策略。
"""

from collections import Counter
from collections.abc import Iterable

from ..config import get_config


class FileNamingStrategy:
    """文件命名策略类"""

    @staticmethod
    def export_name(file_name: str, prefix: str | None = None) -> str:
        """生成单个图片的导出文件名

        Args:
            file_name: 原始文件名
            prefix: 文件名前缀，默认使用配置中的 EXPORT_PREFIX

        Returns:
            str: 导出文件名，如 ``compressed_photo.jpg``
        """
        if prefix is None:
            prefix = get_config().export.EXPORT_PREFIX
        return f"{prefix}{file_name}"

    @staticmethod
    def archive_name() -> str:
        """压缩包文件名"""
        return get_config().export.ARCHIVE_NAME

    @staticmethod
    def find_duplicates(names: Iterable[str]) -> list[str]:
        """找出重复的文件名，按首次出现的顺序返回"""
        counts = Counter(names)
        return [name for name, count in counts.items() if count > 1]

"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

# 从日志工具模块导入
from .logging_helpers import get_logger, setup_logging

# 从消息格式化模块导入
from .message_formatter import (
    MessageFormatter,
    format_validation_error,
)

# 从命名助手模块导入
from .naming_helpers import FileNamingStrategy

# 从大小格式化模块导入
from .size_format import format_file_size


__all__ = [
    "FileNamingStrategy",
    "MessageFormatter",
    "format_file_size",
    "format_validation_error",
    "get_logger",
    "setup_logging",
]

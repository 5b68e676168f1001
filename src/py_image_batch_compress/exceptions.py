"""图像批量压缩异常处理模块。

定义统一的异常类和错误处理机制，包含现代化的异常处理装饰器。
"""

from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class ImageBatchError(Exception):
    """批量压缩相关错误基类"""

    def __init__(self, message: str, file_name: str | None = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name


class ValidationError(ImageBatchError):
    """参数验证错误 - 统一的验证错误类型"""

    pass


class NoImagesError(ImageBatchError):
    """输入中没有任何图片文件"""

    def __init__(self, message: str | None = None):
        super().__init__(message or MessageFormatter.no_images())


class CompressionError(ImageBatchError):
    """单张图片压缩错误基类"""

    pass


class DecodeError(CompressionError):
    """图片数据无法解码"""

    pass


class EncodeError(CompressionError):
    """编码器没有产生输出"""

    pass


class ExportError(ImageBatchError):
    """导出错误基类"""

    pass


class EmptyBatchError(ExportError):
    """批次为空，没有可导出的图片"""

    def __init__(self, message: str | None = None):
        super().__init__(message or MessageFormatter.empty_batch())


class IncompleteItemError(ExportError):
    """存在尚未完成首次压缩的图片"""

    def __init__(self, file_name: str, item_id: str | None = None):
        super().__init__(MessageFormatter.item_incomplete(file_name), file_name)
        self.item_id = item_id


class DuplicateNameError(ExportError):
    """压缩包内出现重复的文件名"""

    def __init__(self, export_name: str):
        super().__init__(MessageFormatter.duplicate_name(export_name), export_name)


# 现代化异常处理装饰器
def handle_image_errors(operation_name: str = "图像解码"):
    """将 Pillow 的解码异常统一转换为 DecodeError

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ImageBatchError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise DecodeError(f"无法识别的图像数据: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise DecodeError(f"图像过大，可能存在安全风险: {e}") from e
            except (OSError, ValueError, SyntaxError) as e:
                # Pillow 对截断或损坏的数据会抛出这些异常
                logger.debug(f"{operation_name} - 数据损坏: {e}")
                raise DecodeError(f"图像数据损坏: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    提供标准化的错误日志记录功能。
    """

    @staticmethod
    def log_error(
        operation: str, target: str, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"图像压缩"、"导出压缩包"等）
            target: 相关文件名
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, target, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def handle_compression_error(
        error: Exception, file_name: str, operation: str = "图像压缩"
    ) -> str:
        """按异常类型记录单张图片的压缩失败，返回给条目保存的错误信息"""
        match error:
            case CompressionError() | ValidationError():
                ErrorHandler.log_error(operation, file_name, error, "warning")
            case _:
                ErrorHandler.log_error(f"{operation} - 未知错误", file_name, error)
        return f"{operation}: {error}"

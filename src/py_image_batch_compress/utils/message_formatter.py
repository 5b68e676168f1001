"""消息格式化工具模块。

提供统一的错误消息、成功消息格式化功能。
"""

from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def no_images() -> str:
        """没有可用图片的提示消息"""
        return "请上传图片文件！"

    @staticmethod
    def empty_batch() -> str:
        """批次为空的提示消息"""
        return "没有可导出的图片"

    @staticmethod
    def item_incomplete(file_name: str) -> str:
        """图片尚未压缩完成的提示消息"""
        return f"图片仍在压缩中，暂时无法导出: {file_name}"

    @staticmethod
    def duplicate_name(export_name: str) -> str:
        """导出文件名重复的提示消息"""
        return f"导出文件名重复: {export_name}"

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg

    @staticmethod
    def format_error(operation: str, target: Any, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{target}]: {error}"


# 便捷函数
def format_validation_error(field: str, value: Any, expected: str | None = None) -> str:
    """格式化验证错误消息"""
    reason = f"期望: {expected}" if expected else None
    return MessageFormatter.validation_error(field, value, reason)

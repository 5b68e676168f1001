"""压缩结果模型。

定义图片压缩与导出操作的结果数据结构。
"""

from pydantic import BaseModel, Field, computed_field

from ..utils.size_format import format_file_size


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """压缩率（小数），压缩后变大时为负数"""
    if original_size <= 0:
        return 0.0
    return (original_size - compressed_size) / original_size


def format_ratio_percent(ratio: float) -> str:
    """压缩率的百分比文本，保留一位小数"""
    return f"{ratio * 100:.1f}%"


class BaseResult(BaseModel):
    """结果基类，包含通用方法"""

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return format_file_size(size_bytes)


class EncodedImage(BaseResult):
    """单次重新编码的结果"""

    encoded_bytes: bytes = Field(repr=False, description="编码后的数据")
    original_size: int = Field(ge=0, description="原始大小（字节）")
    mime_type: str = Field(description="输出 MIME 类型")
    format_used: str = Field(description="使用的 Pillow 格式")
    quality_used: int | None = Field(None, description="编码器实际使用的质量值")
    dimensions: tuple[int, int] = Field(description="像素尺寸")

    @computed_field
    def encoded_size(self) -> int:
        """编码后大小（字节）"""
        return len(self.encoded_bytes)

    def get_compression_ratio(self) -> float:
        """压缩率（小数，可能为负）"""
        return calculate_compression_ratio(self.original_size, len(self.encoded_bytes))

    def get_summary(self) -> str:
        """压缩结果摘要"""
        return (
            f"{self.format_size(self.original_size)} → "
            f"{self.format_size(len(self.encoded_bytes))} "
            f"({format_ratio_percent(self.get_compression_ratio())})"
        )


class ExportedFile(BaseResult):
    """可供下载的单个文件"""

    file_name: str = Field(description="下载文件名")
    data: bytes = Field(repr=False, description="文件内容")
    mime_type: str = Field(description="文件 MIME 类型")

    @computed_field
    def size(self) -> int:
        """文件大小（字节）"""
        return len(self.data)

    def get_size_human(self) -> str:
        """人类可读的文件大小"""
        return self.format_size(len(self.data))


class BatchSummary(BaseResult):
    """批次统计"""

    total_count: int = Field(0, description="图片总数")
    ready_count: int = Field(0, description="已完成数量")
    pending_count: int = Field(0, description="压缩中数量")
    failed_count: int = Field(0, description="失败数量")
    total_original_size: int = Field(0, description="已完成图片的原始总大小")
    total_compressed_size: int = Field(0, description="已完成图片的压缩后总大小")

    def get_overall_compression_ratio(self) -> float:
        """整体压缩率（小数）"""
        return calculate_compression_ratio(
            self.total_original_size, self.total_compressed_size
        )

    def get_summary(self) -> str:
        """批次摘要"""
        ratio = format_ratio_percent(self.get_overall_compression_ratio())
        return (
            f"完成 {self.ready_count}/{self.total_count} 张图片"
            f"（压缩中 {self.pending_count}，失败 {self.failed_count}），"
            f"{self.format_size(self.total_original_size)} → "
            f"{self.format_size(self.total_compressed_size)} ({ratio})"
        )

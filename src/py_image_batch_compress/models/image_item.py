"""图片条目模型。

描述批次中一张图片的原始数据、最近一次压缩结果和派生的展示指标。
条目只保存数据，所有写入由 BatchController 完成。
"""

import base64
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, model_validator

from ..utils.naming_helpers import FileNamingStrategy
from ..utils.size_format import format_file_size
from .compression_result import (
    EncodedImage,
    calculate_compression_ratio,
    format_ratio_percent,
)


class ItemStatus(str, Enum):
    """条目状态枚举"""

    PENDING = "pending"  # 首次压缩尚未完成
    PROCESSING = "processing"  # 已有结果，新的请求仍在进行
    READY = "ready"  # 结果对应最近一次请求
    FAILED = "failed"  # 最近一次请求失败


class ImageItem(BaseModel):
    """批次中的单张图片"""

    id: str = Field(default_factory=lambda: uuid4().hex, frozen=True)
    file_name: str = Field(frozen=True, description="原始文件名")
    mime_type: str = Field(frozen=True, description="原始 MIME 类型")
    original_bytes: bytes = Field(frozen=True, repr=False, description="原始字节")
    original_size: int = Field(0, frozen=True, description="原始大小（字节）")

    # 最近一次生效的压缩结果
    compressed_bytes: bytes | None = Field(None, repr=False)
    compression_quality: float | None = Field(None, description="产生当前结果的质量")
    encoded_format: str | None = Field(None, description="当前结果的 Pillow 格式")
    encoded_dimensions: tuple[int, int] | None = Field(None, description="像素尺寸")

    # 请求序号：只有最近发出的请求的结果才会生效
    requested_quality: float | None = Field(None, description="最近一次请求的质量")
    latest_sequence: int = Field(0, ge=0, description="最近发出的请求序号")
    settled_sequence: int = Field(0, ge=0, description="最近完成的请求序号")
    last_error: str | None = Field(None, description="最近一次请求的错误信息")

    @model_validator(mode="before")
    @classmethod
    def _fill_original_size(cls, data: Any) -> Any:
        if isinstance(data, dict) and "original_bytes" in data:
            data = {**data, "original_size": len(data["original_bytes"])}
        return data

    # ------------------------------------------------------------------
    # 派生的展示字段
    # ------------------------------------------------------------------

    @property
    def display_name(self) -> str:
        return self.file_name

    @computed_field
    def export_name(self) -> str:
        """导出文件名"""
        return FileNamingStrategy.export_name(self.file_name)

    @computed_field
    def compressed_size(self) -> int | None:
        """压缩后大小（字节），未完成时为 None"""
        if self.compressed_bytes is None:
            return None
        return len(self.compressed_bytes)

    @computed_field
    def compression_ratio(self) -> float | None:
        """压缩率（小数），可能为负"""
        if self.compressed_bytes is None:
            return None
        return calculate_compression_ratio(
            self.original_size, len(self.compressed_bytes)
        )

    @computed_field
    def status(self) -> ItemStatus:
        """当前状态"""
        settled = self.settled_sequence == self.latest_sequence
        if self.last_error is not None and settled:
            return ItemStatus.FAILED
        if self.compressed_bytes is None:
            return ItemStatus.PENDING
        if self.settled_sequence < self.latest_sequence:
            return ItemStatus.PROCESSING
        return ItemStatus.READY

    @property
    def is_processing(self) -> bool:
        return self.settled_sequence < self.latest_sequence

    @property
    def compression_ratio_text(self) -> str | None:
        """压缩率文本，如 ``12.3%``"""
        ratio = self.compression_ratio
        return None if ratio is None else format_ratio_percent(ratio)

    @property
    def is_negative_ratio(self) -> bool:
        """压缩后是否反而变大"""
        ratio = self.compression_ratio
        return ratio is not None and ratio < 0

    def get_original_size_human(self) -> str:
        return format_file_size(self.original_size)

    def get_compressed_size_human(self) -> str | None:
        size = self.compressed_size
        return None if size is None else format_file_size(size)

    def preview_data_url(self) -> str:
        """原图的 data URL，供渲染层直接显示"""
        return _to_data_url(self.mime_type, self.original_bytes)

    def compressed_data_url(self) -> str | None:
        """压缩结果的 data URL"""
        if self.compressed_bytes is None:
            return None
        return _to_data_url(self.mime_type, self.compressed_bytes)

    # ------------------------------------------------------------------
    # 由 BatchController 调用的状态变更
    # ------------------------------------------------------------------

    def begin_compression(self, quality: float) -> int:
        """登记一次新的压缩请求，返回其序号"""
        self.latest_sequence += 1
        self.requested_quality = quality
        return self.latest_sequence

    def is_current(self, sequence: int) -> bool:
        """序号是否仍是最近发出的请求"""
        return sequence == self.latest_sequence

    def apply_result(self, sequence: int, result: EncodedImage, quality: float) -> bool:
        """应用压缩结果，过期的结果直接丢弃

        Returns:
            bool: 结果是否生效
        """
        if not self.is_current(sequence):
            return False

        self.compressed_bytes = result.encoded_bytes
        self.compression_quality = quality
        self.encoded_format = result.format_used
        self.encoded_dimensions = result.dimensions
        self.settled_sequence = sequence
        self.last_error = None
        return True

    def record_failure(self, sequence: int, message: str) -> bool:
        """记录压缩失败，过期的失败同样丢弃；已有的结果保持不变"""
        if not self.is_current(sequence):
            return False

        self.settled_sequence = sequence
        self.last_error = message
        return True


def _to_data_url(mime_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"

"""输入文件模型。"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..utils.message_formatter import format_validation_error
from .constants import ImageFormats, is_image_mime_type


class InputFile(BaseModel):
    """调用方交给批处理的原始文件：字节、文件名、声明的 MIME 类型"""

    data: bytes = Field(repr=False, description="原始字节")
    file_name: str = Field(min_length=1, description="原始文件名")
    mime_type: str = Field("", description="声明的 MIME 类型")

    @property
    def is_image(self) -> bool:
        """声明的类型是否为图片"""
        return is_image_mime_type(self.mime_type)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "InputFile":
        """从磁盘读取文件，未指定类型时按扩展名推断"""
        path = Path(path)
        if mime_type is None:
            mime_type = ImageFormats.get_mime_type_for_extension(path)
        return cls(data=path.read_bytes(), file_name=path.name, mime_type=mime_type)

    @classmethod
    def coerce(cls, value: Any) -> "InputFile":
        """接受 InputFile 或 ``(bytes, 文件名, MIME)`` 元组

        Raises:
            ValidationError: 输入形状或字段不合法
        """
        if isinstance(value, cls):
            return value

        data, file_name, mime_type = cls._unpack(value)
        try:
            return cls(data=data, file_name=file_name, mime_type=mime_type or "")
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ValidationError(
                format_validation_error(field, error.get("input"), error["msg"]),
                file_name if isinstance(file_name, str) else None,
            ) from e

    @classmethod
    def declared_mime_type(cls, value: Any) -> str:
        """不做完整校验，只取出声明的 MIME 类型"""
        if isinstance(value, cls):
            return value.mime_type
        mime_type = cls._unpack(value)[2]
        return mime_type if isinstance(mime_type, str) else ""

    @staticmethod
    def _unpack(value: Any) -> tuple[Any, Any, Any]:
        if isinstance(value, tuple | list) and len(value) == 3:
            return value[0], value[1], value[2]
        raise ValidationError(
            format_validation_error(
                "input_file", type(value).__name__, "(bytes, 文件名, MIME) 元组"
            )
        )

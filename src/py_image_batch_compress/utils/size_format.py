"""文件大小格式化模块。"""

from humanize import naturalsize


def format_file_size(size_bytes: int, precision: int = 2) -> str:
    """将字节数格式化为人类可读的大小

    使用 1024 进制，小数最多保留 ``precision`` 位并去掉末尾的 0，
    例如 ``1536 -> "1.5 KiB"``、``0 -> "0 Bytes"``。

    Args:
        size_bytes: 字节数
        precision: 最多保留的小数位数

    Returns:
        str: 格式化后的大小

    Raises:
        ValueError: 字节数为负数时
    """
    if size_bytes < 0:
        raise ValueError(f"字节数不能为负数: {size_bytes}")

    text = naturalsize(size_bytes, binary=True, format=f"%.{precision}f")
    number, _, unit = text.partition(" ")
    if "." in number:
        number = number.rstrip("0").rstrip(".")
    return f"{number} {unit}"

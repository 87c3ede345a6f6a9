"""
文件路径：pdf_signer/components/text.py

说明：文件名与显示名相关的文本处理。
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Union

from ..variables import CONST_PDF_SUFFIX, CONST_SIGNED_SUFFIX


_LAST_EXTENSION = re.compile(r"\.[^/.]+$")


def display_name_from_filename(filename: Union[str, Path]) -> str:
    """去掉最后一个扩展名作为文档显示名。

    示例：
        "doc.pdf" -> "doc"；"a.b.pdf" -> "a.b"；".pdf" -> ""
    """
    name = Path(str(filename)).name
    return _LAST_EXTENSION.sub("", name)


def signed_filename(display_name: str) -> str:
    """输出文件名：<显示名>_signed.pdf。"""
    return f"{display_name}{CONST_SIGNED_SUFFIX}{CONST_PDF_SUFFIX}"


__all__ = [
    "display_name_from_filename",
    "signed_filename",
]

"""
文件路径：pdf_signer/data_handler.py

模块职责：
- 读取签名图片并得到其自然尺寸（SignatureAsset）。
- 查询可选的默认签名图片：不存在属于正常情况，只记录日志。
- 校验待上传的 PDF 路径并推导显示名。

变量引用说明（来自 pdf_signer/variables.py）：
- PATH_DEFAULT_SIGNATURE, CONST_PDF_SUFFIX, ERR_INVALID_PDF

组件调用说明（供业务模块）：
- fetch_default_signature：启动时查询默认签名
- load_signature_asset：用户上传签名图片
- load_pdf_documents：上传前的路径校验，返回 (路径, 显示名) 列表
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .components import (
    FileHandler,
    SignatureLoadError,
    display_name_from_filename,
    get_logger,
)
from .models import SignatureAsset
from .variables import CONST_PDF_SUFFIX, ERR_INVALID_PDF, PATH_DEFAULT_SIGNATURE


logger = get_logger(__name__)


def load_signature_asset(source: Union[Path, str, bytes]) -> SignatureAsset:
    """读取签名图片。

    参数：
        source: 图片路径或图片字节。

    返回：
        SignatureAsset（包含原始字节与自然尺寸）。

    异常：
        SignatureLoadError: 文件缺失、无法识别或尺寸为 0。
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
        label = "<bytes>"
    else:
        path = Path(source)
        label = str(path)
        try:
            FileHandler.validate_readable_file(path)
            data = path.read_bytes()
        except OSError as exc:
            raise SignatureLoadError(f"签名图片不可读：{path}") from exc

    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise SignatureLoadError(f"无法识别签名图片：{label}") from exc

    if width <= 0 or height <= 0:
        raise SignatureLoadError(f"签名图片尺寸无效：{label}（{width}x{height}）")
    logger.info("已加载签名图片：%s（%sx%s）", label, width, height)
    return SignatureAsset(image_bytes=data, natural_width=int(width), natural_height=int(height), source=label)


def fetch_default_signature(path: Optional[Path] = None) -> Optional[SignatureAsset]:
    """查询默认签名图片；不存在或不可用时返回 None。"""
    target = path or PATH_DEFAULT_SIGNATURE
    if not target.exists():
        logger.info("未找到默认签名图片：%s", target)
        return None
    try:
        return load_signature_asset(target)
    except SignatureLoadError as exc:
        logger.warning("默认签名图片不可用，需手动上传：%s", exc)
        return None


def load_pdf_documents(paths: Iterable[Union[Path, str]]) -> List[Tuple[Path, str]]:
    """校验上传路径，返回 (路径, 显示名) 列表，顺序与输入一致。

    异常：
        FileNotFoundError: 文件不存在。
        ValueError: 扩展名不是 .pdf。
    """
    items: List[Tuple[Path, str]] = []
    for raw in paths:
        path = Path(raw)
        FileHandler.validate_readable_file(path)
        if path.suffix.lower() != CONST_PDF_SUFFIX:
            raise ValueError(f"[{ERR_INVALID_PDF}] 仅支持 PDF 文件：{path.name}")
        items.append((path, display_name_from_filename(path.name)))
    return items


__all__ = [
    "load_signature_asset",
    "fetch_default_signature",
    "load_pdf_documents",
]

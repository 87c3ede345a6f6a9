"""
文件路径：pdf_signer/processors/rasterizer.py

说明：PyMuPDF 解码 PDF 并逐页渲染为 PNG 位图。

- 渲染比例 = 设备像素比 × 过采样倍数（默认 1 × 2），保证整页宽度嵌入输出 PDF 时足够清晰；
- 同一文档内严格按页序串行渲染，第 n+1 页在第 n 页完成后才开始；
- 任一页无法得到绘制表面时整份文档失败，不返回部分页面。
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Tuple

import fitz  # PyMuPDF

from ..components import (
    DecodeError,
    FileHandler,
    RenderSurfaceError,
    display_name_from_filename,
    get_logger,
)
from ..models import Document, Page
from ..variables import (
    CONST_DEVICE_PIXEL_RATIO,
    CONST_RASTER_IMAGE_FORMAT,
    CONST_RASTER_SCALE,
)


logger = get_logger(__name__)

PageProgress = Callable[[int, int], None]


def effective_scale(device_pixel_ratio: float = CONST_DEVICE_PIXEL_RATIO, oversample: float = CONST_RASTER_SCALE) -> float:
    """渲染比例；非法输入回退为 1。"""
    dpr = float(device_pixel_ratio) if device_pixel_ratio and device_pixel_ratio > 0 else 1.0
    over = float(oversample) if oversample and oversample > 0 else 1.0
    return dpr * over


def open_pdf(content: bytes, display_name: str = "") -> fitz.Document:
    """从字节打开 PDF，非法、加密或空文档抛 DecodeError。"""
    if not content:
        raise DecodeError(f"空文件，无法解码：{display_name}")
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception as exc:  # noqa: BLE001
        raise DecodeError(f"PDF 解码失败：{display_name}：{exc}") from exc

    if doc.needs_pass:
        doc.close()
        raise DecodeError(f"PDF 已加密，无法渲染：{display_name}")
    if doc.page_count <= 0:
        doc.close()
        raise DecodeError(f"PDF 不包含任何页面：{display_name}")
    return doc


def render_page_to_png(page: fitz.Page, scale: float) -> Tuple[bytes, int, int]:
    """将单页渲染为 PNG。

    返回：
        (png_bytes, width_px, height_px)
    异常：
        RenderSurfaceError: 无法创建像素图或编码失败。
    """
    try:
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    except Exception as exc:  # noqa: BLE001
        raise RenderSurfaceError(f"第 {page.number + 1} 页无法获取绘制表面：{exc}") from exc
    if pix is None or pix.width <= 0 or pix.height <= 0:
        raise RenderSurfaceError(f"第 {page.number + 1} 页绘制表面为空")
    try:
        data = pix.tobytes(CONST_RASTER_IMAGE_FORMAT.lower())
    except Exception as exc:  # noqa: BLE001
        raise RenderSurfaceError(f"第 {page.number + 1} 页位图编码失败：{exc}") from exc
    return data, int(pix.width), int(pix.height)


def rasterize_pdf(
    content: bytes,
    display_name: str,
    *,
    device_pixel_ratio: float = CONST_DEVICE_PIXEL_RATIO,
    oversample: float = CONST_RASTER_SCALE,
    on_page: Optional[PageProgress] = None,
) -> Tuple[Page, ...]:
    """把 PDF 字节渲染为按页序排列的页面元组（页码 1..N）。

    参数：
        content: PDF 字节。
        display_name: 文档显示名，写入每个 Page 作为反向引用。
        device_pixel_ratio: 设备像素比。
        oversample: 过采样倍数。
        on_page: 每页完成后的回调 (page_number, total)。

    异常：
        DecodeError: 文档无法解码。
        RenderSurfaceError: 任一页渲染失败（整份文档失败）。
    """
    dpr = float(device_pixel_ratio) if device_pixel_ratio and device_pixel_ratio > 0 else 1.0
    scale = effective_scale(dpr, oversample)
    doc = open_pdf(content, display_name)
    pages: List[Page] = []
    try:
        total = doc.page_count
        for index in range(total):
            page = doc.load_page(index)
            data, width_px, height_px = render_page_to_png(page, scale)
            pages.append(
                Page(
                    document_name=display_name,
                    page_number=index + 1,
                    bitmap=data,
                    bitmap_width=width_px,
                    bitmap_height=height_px,
                    native_width=float(page.rect.width),
                    native_height=float(page.rect.height),
                    device_pixel_ratio=dpr,
                    raster_scale=scale,
                )
            )
            if on_page is not None:
                on_page(index + 1, total)
    finally:
        doc.close()

    logger.info("光栅化完成：%s，共 %s 页（scale=%.2f）", display_name, len(pages), scale)
    return tuple(pages)


def rasterize_document(
    path: Path,
    *,
    device_pixel_ratio: float = CONST_DEVICE_PIXEL_RATIO,
    oversample: float = CONST_RASTER_SCALE,
    on_page: Optional[PageProgress] = None,
) -> Document:
    """读取文件并返回带页面的 Document。"""
    FileHandler.validate_readable_file(path)
    content = path.read_bytes()
    display_name = display_name_from_filename(path.name)
    pages = rasterize_pdf(
        content,
        display_name,
        device_pixel_ratio=device_pixel_ratio,
        oversample=oversample,
        on_page=on_page,
    )
    return Document(path=path, display_name=display_name, content=content, pages=pages)


__all__ = [
    "effective_scale",
    "open_pdf",
    "render_page_to_png",
    "rasterize_pdf",
    "rasterize_document",
]

"""
文件路径：pdf_signer/processors/assembler.py

说明：ReportLab 把快照序列组装为 A4 纵向的多页 PDF，PyPDF2 校验页数。

- 每张快照一页：图片宽度 = 页面宽度，高度按快照宽高比推导，贴页面左上角放置；
- 第一张快照占用第一页，其后每张快照先新建一页再绘制，页数与顺序与输入完全一致；
- 快照序列惰性消费：生成任一快照时抛出的异常都会中止整次组装，不会产生部分 PDF；
- 写盘先写同目录临时文件再原子替换，失败时目标路径不会出现残缺文件。
"""

from __future__ import annotations

import os
from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PyPDF2 import PdfReader
from reportlab.lib.pagesizes import portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..components import (
    AssemblyError,
    FileHandler,
    SignerError,
    get_logger,
    retry_on_exception,
)
from ..models import ExportResult, Snapshot
from ..variables import CONST_OUTPUT_PAGE_SIZE


logger = get_logger(__name__)


def image_box(snapshot_width: int, snapshot_height: int, page_width: float) -> Tuple[float, float]:
    """快照在输出页上的绘制尺寸：宽度铺满页面，高度按宽高比推导。"""
    if snapshot_width <= 0 or snapshot_height <= 0:
        raise AssemblyError(f"快照尺寸无效：{snapshot_width}x{snapshot_height}")
    return page_width, float(snapshot_height) * page_width / float(snapshot_width)


def count_pdf_pages(data: bytes) -> int:
    return len(PdfReader(BytesIO(data)).pages)


def assemble_pdf(
    snapshots: Iterable[Snapshot],
    page_size: Tuple[float, float] = CONST_OUTPUT_PAGE_SIZE,
) -> bytes:
    """按顺序把快照组装成 PDF，返回 PDF 字节。

    参数：
        snapshots: 快照序列（可为生成器，逐个截取）。
        page_size: 输出页面尺寸（pt），强制为纵向。

    异常：
        AssemblyError: 序列为空、截取失败或组装失败。
    """
    page_width, page_height = portrait(page_size)
    buf = BytesIO()
    pdf = canvas.Canvas(buf, pagesize=(page_width, page_height))
    count = 0
    try:
        for snapshot in snapshots:
            if count > 0:
                pdf.showPage()
            img_w, img_h = image_box(snapshot.width, snapshot.height, page_width)
            # ReportLab 原点在左下，贴页面顶部放置
            pdf.drawImage(
                ImageReader(BytesIO(snapshot.image_bytes)),
                0,
                page_height - img_h,
                width=img_w,
                height=img_h,
            )
            count += 1
        if count == 0:
            raise AssemblyError("没有可组装的快照")
        pdf.save()
    except AssemblyError:
        raise
    except SignerError as exc:
        raise AssemblyError(f"快照截取失败，已中止导出：{exc}", err_code=exc.err_code) from exc
    except Exception as exc:  # noqa: BLE001
        raise AssemblyError(f"PDF 组装失败：{exc}") from exc

    data = buf.getvalue()
    pages = count_pdf_pages(data)
    if pages != count:
        raise AssemblyError(f"输出页数不一致：期望 {count}，实际 {pages}")
    return data


@retry_on_exception(exceptions=(PermissionError,))
def save_pdf(data: bytes, target: Path) -> Path:
    """原子写入：同目录临时文件 + os.replace。"""
    FileHandler.ensure_parent_writable(target)
    tmp = target.with_name(f".{target.name}.part")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, target)
    finally:
        tmp.unlink(missing_ok=True)
    return target


def export_snapshots(
    snapshots: Iterable[Snapshot],
    display_name: str,
    output_dir: Optional[Path] = None,
    page_number: Optional[int] = None,
) -> ExportResult:
    """组装并保存为 `<显示名>_signed.pdf`（单页导出时为 `<显示名> Page <n>_signed.pdf`）。"""
    data = assemble_pdf(snapshots)
    target = FileHandler.signed_output_path(display_name, output_dir=output_dir, page_number=page_number)
    save_pdf(data, target)
    pages = count_pdf_pages(data)
    logger.info("导出完成：%s（%s 页，%.1f KB）", target, pages, len(data) / 1024.0)
    return ExportResult(
        path=target,
        page_count=pages,
        size_bytes=len(data),
        document_name=display_name,
        page_number=page_number,
    )


__all__ = [
    "image_box",
    "count_pdf_pages",
    "assemble_pdf",
    "save_pdf",
    "export_snapshots",
]

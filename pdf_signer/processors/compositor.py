"""
文件路径：pdf_signer/processors/compositor.py

说明：Pillow 将页面位图与签名框合成为一张扁平快照。

- 画布尺寸 = 容器尺寸 × 截取比例（默认 2 倍），页面位图按画布重采样；
- 签名图片不论原始模式（P/LA/L/CMYK/RGB）一律转为 RGBA 后按透明度叠加，
  保证不同来源的图片都能被正确截取，而不是得到空白结果；
- 输出为最高质量 JPEG：源内容本身已是位图，不需要无损保存。
"""

from __future__ import annotations

from io import BytesIO
from typing import Optional, Tuple

from PIL import Image

from ..components import CaptureError, get_logger
from ..models import Overlay, Page, SignatureAsset, Snapshot
from ..variables import (
    CONST_SNAPSHOT_IMAGE_FORMAT,
    CONST_SNAPSHOT_JPEG_QUALITY,
    CONST_SNAPSHOT_SCALE,
)


logger = get_logger(__name__)


def _decode_rgb(data: bytes) -> Image.Image:
    with Image.open(BytesIO(data)) as src:
        return src.convert("RGB")


def _decode_rgba(data: bytes) -> Image.Image:
    with Image.open(BytesIO(data)) as src:
        return src.convert("RGBA")


def _resolve_container(page: Page, overlay: Optional[Overlay], container: Optional[Tuple[float, float]]) -> Tuple[float, float]:
    if container is not None:
        return float(container[0]), float(container[1])
    if overlay is not None:
        return overlay.bounds_width, overlay.bounds_height
    return page.container_size


def capture_snapshot(
    page: Page,
    overlay: Optional[Overlay] = None,
    asset: Optional[SignatureAsset] = None,
    *,
    scale: float = CONST_SNAPSHOT_SCALE,
    container: Optional[Tuple[float, float]] = None,
    quality: int = CONST_SNAPSHOT_JPEG_QUALITY,
) -> Snapshot:
    """截取页面当前的视觉状态。

    参数：
        page: 光栅化后的页面。
        overlay: 该页签名框；None 表示无签名。
        asset: 签名图片；与 overlay 同时提供时才叠加。
        scale: 相对容器尺寸的截取比例。
        container: 容器尺寸；默认取签名框边界或页面渲染尺寸。
        quality: JPEG 质量（1-100）。

    返回：
        Snapshot

    异常：
        CaptureError: 位图解码、合成或编码失败。
    """
    cw, ch = _resolve_container(page, overlay, container)
    if cw <= 0 or ch <= 0 or scale <= 0:
        raise CaptureError(f"截取区域无效：{cw}x{ch} @ {scale}")
    out_w = max(1, int(round(cw * scale)))
    out_h = max(1, int(round(ch * scale)))

    try:
        canvas = _decode_rgb(page.bitmap)
        if canvas.size != (out_w, out_h):
            canvas = canvas.resize((out_w, out_h), resample=Image.Resampling.LANCZOS)

        if overlay is not None and asset is not None:
            # 签名框坐标位于其自身边界坐标系，换算到画布像素
            sx = out_w / overlay.bounds_width
            sy = out_h / overlay.bounds_height
            sig_w = max(1, int(round(overlay.width * sx)))
            sig_h = max(1, int(round(overlay.height * sy)))
            signature = _decode_rgba(asset.image_bytes).resize((sig_w, sig_h), resample=Image.Resampling.LANCZOS)
            layer = canvas.convert("RGBA")
            layer.alpha_composite(signature, dest=(int(round(overlay.x * sx)), int(round(overlay.y * sy))))
            canvas = layer.convert("RGB")

        buf = BytesIO()
        canvas.save(buf, format=CONST_SNAPSHOT_IMAGE_FORMAT, quality=int(quality), subsampling=0)
    except Exception as exc:  # noqa: BLE001
        # Pillow 对畸形图片可能抛出 SyntaxError、struct.error 等，统一归为截取失败
        raise CaptureError(f"快照截取失败：{page.document_name} 第 {page.page_number} 页：{exc}") from exc

    logger.debug("已截取快照：%s 第 %s 页 %sx%s", page.document_name, page.page_number, out_w, out_h)
    return Snapshot(
        image_bytes=buf.getvalue(),
        width=out_w,
        height=out_h,
        document_name=page.document_name,
        page_number=page.page_number,
    )


__all__ = ["capture_snapshot"]

"""
文件路径：pdf_signer/components/coords.py

说明：坐标与尺寸计算相关通用函数（容器坐标系：左上角为原点，向右、向下为正）。
"""

from __future__ import annotations

from typing import Tuple


def clamp_coords(
    x: float,
    y: float,
    page_width: float,
    page_height: float,
    margin: float = 0.0,
) -> Tuple[float, float]:
    """将坐标限制在页面范围内，避免写出页面边界。

    参数：
        x, y: 输入坐标。
        page_width, page_height: 页面宽高。
        margin: 允许的内边距。
    返回：
        (clamped_x, clamped_y)
    """
    clamped_x = max(margin, min(page_width - margin, x))
    clamped_y = max(margin, min(page_height - margin, y))
    return clamped_x, clamped_y


def clamp_rect_position(
    x: float,
    y: float,
    width: float,
    height: float,
    bounds_width: float,
    bounds_height: float,
) -> Tuple[float, float]:
    """钳制矩形左上角，使整个矩形落在 [0, bounds] 范围内。

    矩形比容器还大时左上角固定为 0（由调用方先保证尺寸可容纳）。
    """
    max_x = max(0.0, float(bounds_width) - float(width))
    max_y = max(0.0, float(bounds_height) - float(height))
    return clamp_coords(x, y, page_width=max_x, page_height=max_y)


def fit_size_within(
    width: float,
    aspect_ratio: float,
    max_width: float,
    max_height: float,
) -> Tuple[float, float]:
    """在保持宽高比（宽/高）的前提下，把尺寸缩到 max_width × max_height 之内。

    参数：
        width: 期望宽度。
        aspect_ratio: 宽 / 高，必须为正。
        max_width, max_height: 可用空间。
    返回：
        (width, height)
    """
    if aspect_ratio <= 0:
        raise ValueError(f"宽高比必须为正数：{aspect_ratio}")
    limit = min(float(max_width), float(max_height) * aspect_ratio)
    w = max(0.0, min(float(width), limit))
    return w, w / aspect_ratio


__all__ = [
    "clamp_coords",
    "clamp_rect_position",
    "fit_size_within",
]

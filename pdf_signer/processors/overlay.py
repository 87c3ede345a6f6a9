"""
文件路径：pdf_signer/processors/overlay.py

说明：签名框状态机。

- 拖动与缩放均表达为纯函数 `(当前签名框, 手势) -> 新签名框`，与 GUI 事件系统无关，便于直接测试；
- 不变量：签名框矩形始终完全位于容器内；宽高比始终等于签名图片的自然宽高比；
- OverlayController 为单页持有签名框，页与页之间互不影响，只共享签名图片引用。

缩放规则：
- 与手柄相对的角保持不动；边手柄时相对的边不动，且与之垂直的起始边（左右手柄取上边、上下手柄取左边）不动；
- 左右手柄与四角手柄由宽度驱动，上下手柄由高度驱动；四角手柄在高度的相对变化更大时改由高度驱动；
- 尺寸被限制在“固定角到容器边界”的可用空间内，最小宽度为 CONST_OVERLAY_MIN_WIDTH（空间不足时取可用空间）。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from ..components import clamp_rect_position, fit_size_within, get_logger
from ..models import Overlay, Page, SignatureAsset
from ..variables import CONST_OVERLAY_INITIAL_WIDTH_RATIO, CONST_OVERLAY_MIN_WIDTH


logger = get_logger(__name__)


class ResizeHandle(str, Enum):
    TOP_LEFT = "top-left"
    TOP = "top"
    TOP_RIGHT = "top-right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom-left"
    LEFT = "left"

    @property
    def is_corner(self) -> bool:
        return self in (
            ResizeHandle.TOP_LEFT,
            ResizeHandle.TOP_RIGHT,
            ResizeHandle.BOTTOM_RIGHT,
            ResizeHandle.BOTTOM_LEFT,
        )


@dataclass(frozen=True)
class DragGesture:
    """拖动结束时建议的新左上角。"""

    x: float
    y: float


@dataclass(frozen=True)
class ResizeGesture:
    """缩放结束时交互层报告的新矩形。

    x, y 为交互层报告的左上角，仅用于记录；新位置始终由固定角推导。
    """

    handle: ResizeHandle
    x: float
    y: float
    width: float
    height: float


# 手柄 -> (固定点取 x1?, 固定点取 y1?)；True 表示固定点在右/下边，矩形向左/向上生长
_ANCHORS = {
    ResizeHandle.BOTTOM_RIGHT: (False, False),
    ResizeHandle.RIGHT: (False, False),
    ResizeHandle.BOTTOM: (False, False),
    ResizeHandle.TOP_LEFT: (True, True),
    ResizeHandle.TOP_RIGHT: (False, True),
    ResizeHandle.TOP: (False, True),
    ResizeHandle.BOTTOM_LEFT: (True, False),
    ResizeHandle.LEFT: (True, False),
}


def initial_overlay(
    asset: SignatureAsset,
    container_width: float,
    container_height: float,
    width_ratio: float = CONST_OVERLAY_INITIAL_WIDTH_RATIO,
) -> Optional[Overlay]:
    """根据签名图片与容器尺寸计算初始签名框。

    宽度为容器宽度的 80%，高度按签名宽高比推导，位置为容器原点；
    推导出的高度超出容器时等比缩小。容器尚不可测量（宽或高 ≤ 0）时返回 None。
    """
    if container_width <= 0 or container_height <= 0:
        return None
    aspect = asset.aspect_ratio
    width, height = fit_size_within(
        float(container_width) * float(width_ratio),
        aspect,
        max_width=float(container_width),
        max_height=float(container_height),
    )
    return Overlay(
        x=0.0,
        y=0.0,
        width=width,
        height=height,
        aspect_ratio=aspect,
        bounds_width=float(container_width),
        bounds_height=float(container_height),
    )


def apply_drag(overlay: Overlay, gesture: DragGesture) -> Overlay:
    """拖动：钳制建议位置，使矩形完整落在容器内。"""
    x, y = clamp_rect_position(
        gesture.x,
        gesture.y,
        overlay.width,
        overlay.height,
        overlay.bounds_width,
        overlay.bounds_height,
    )
    return replace(overlay, x=x, y=y)


def _proposed_width(overlay: Overlay, gesture: ResizeGesture) -> float:
    """按手柄决定驱动维度，并换算成宽度。"""
    aspect = overlay.aspect_ratio
    handle = ResizeHandle(gesture.handle)
    if handle in (ResizeHandle.TOP, ResizeHandle.BOTTOM):
        return float(gesture.height) * aspect
    if handle.is_corner and overlay.width > 0 and overlay.height > 0:
        dw = abs(float(gesture.width) / overlay.width - 1.0)
        dh = abs(float(gesture.height) / overlay.height - 1.0)
        if dh > dw:
            return float(gesture.height) * aspect
    return float(gesture.width)


def apply_resize(overlay: Overlay, gesture: ResizeGesture) -> Overlay:
    """缩放：保持宽高比与固定角，结果钳制在容器内。"""
    handle = ResizeHandle(gesture.handle)
    anchor_right, anchor_bottom = _ANCHORS[handle]
    anchor_x = overlay.right if anchor_right else overlay.x
    anchor_y = overlay.bottom if anchor_bottom else overlay.y

    avail_w = anchor_x if anchor_right else overlay.bounds_width - anchor_x
    avail_h = anchor_y if anchor_bottom else overlay.bounds_height - anchor_y
    max_width, _ = fit_size_within(float("inf"), overlay.aspect_ratio, avail_w, avail_h)
    min_width = min(CONST_OVERLAY_MIN_WIDTH, max_width)

    width = max(min_width, min(max_width, _proposed_width(overlay, gesture)))
    height = width / overlay.aspect_ratio

    x = anchor_x - width if anchor_right else anchor_x
    y = anchor_y - height if anchor_bottom else anchor_y
    x, y = clamp_rect_position(x, y, width, height, overlay.bounds_width, overlay.bounds_height)
    return replace(overlay, x=x, y=y, width=width, height=height)


class OverlayController:
    """单页签名框的持有者。

    用法示例：
        ctrl = OverlayController(page)
        ctrl.ensure_initialized(asset)
        ctrl.drag(50, 100)
        ctrl.resize(ResizeHandle.BOTTOM_RIGHT, 50, 100, 300, 90)
    """

    def __init__(self, page: Page, container: Optional[Tuple[float, float]] = None) -> None:
        self.page = page
        self.container: Tuple[float, float] = container if container is not None else page.container_size
        self.overlay: Optional[Overlay] = None
        self.asset: Optional[SignatureAsset] = None

    def ensure_initialized(self, asset: Optional[SignatureAsset]) -> Optional[Overlay]:
        """首次同时具备签名图片与可测量容器时创建签名框；签名图片更换时重新初始化。"""
        if asset is None:
            return self.overlay
        if self.overlay is not None and self.asset is asset:
            return self.overlay
        overlay = initial_overlay(asset, *self.container)
        if overlay is None:
            logger.info("容器尚不可测量，暂不创建签名框：%s 第 %s 页", self.page.document_name, self.page.page_number)
            return None
        self.asset = asset
        self.overlay = overlay
        return overlay

    def drag(self, x: float, y: float) -> Overlay:
        self.overlay = apply_drag(self._require_overlay(), DragGesture(x, y))
        return self.overlay

    def resize(self, handle: ResizeHandle, x: float, y: float, width: float, height: float) -> Overlay:
        self.overlay = apply_resize(self._require_overlay(), ResizeGesture(ResizeHandle(handle), x, y, width, height))
        return self.overlay

    def rebind(self, asset: Optional[SignatureAsset]) -> Optional[Overlay]:
        """更换签名图片：丢弃旧几何并按新图片重新初始化。"""
        self.reset()
        return self.ensure_initialized(asset)

    def reset(self) -> None:
        self.overlay = None
        self.asset = None

    def _require_overlay(self) -> Overlay:
        if self.overlay is None:
            raise RuntimeError(f"签名框尚未初始化：{self.page.document_name} 第 {self.page.page_number} 页")
        return self.overlay


__all__ = [
    "ResizeHandle",
    "DragGesture",
    "ResizeGesture",
    "initial_overlay",
    "apply_drag",
    "apply_resize",
    "OverlayController",
]

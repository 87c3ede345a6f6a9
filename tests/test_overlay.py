"""
文件路径：tests/test_overlay.py

用例目的：签名框状态机的不变量
- 初始签名框：宽 = 容器宽 × 0.8，高按宽高比推导，位于原点；
- 任意拖动/缩放序列之后，矩形完整位于容器内且宽高比不变；
- 缩放时与手柄相对的角保持不动；
- 各页控制器互不影响。
"""

from __future__ import annotations

import random

import pytest

from pdf_signer.models import Overlay, Page, SignatureAsset
from pdf_signer.processors.overlay import (
    DragGesture,
    OverlayController,
    ResizeGesture,
    ResizeHandle,
    apply_drag,
    apply_resize,
    initial_overlay,
)


def _asset(w=120, h=40) -> SignatureAsset:
    return SignatureAsset(image_bytes=b"", natural_width=w, natural_height=h)


def _page(n=1, w=600.0, h=800.0) -> Page:
    return Page(
        document_name="doc",
        page_number=n,
        bitmap=b"",
        bitmap_width=int(w * 2),
        bitmap_height=int(h * 2),
        native_width=w,
        native_height=h,
    )


def _overlay(x=100.0, y=100.0, width=150.0, aspect=3.0) -> Overlay:
    return Overlay(x=x, y=y, width=width, height=width / aspect, aspect_ratio=aspect, bounds_width=600.0, bounds_height=800.0)


class TestInitialOverlay:
    def test_width_ratio_and_origin(self):
        ov = initial_overlay(_asset(120, 40), 600, 800)
        assert (ov.x, ov.y) == (0.0, 0.0)
        assert ov.width == pytest.approx(480.0)
        assert ov.height == pytest.approx(160.0)
        assert ov.aspect_ratio == pytest.approx(3.0)

    def test_tall_signature_shrinks_to_fit(self):
        # 宽 480 推出高 960 > 800，等比缩小到高 800
        ov = initial_overlay(_asset(50, 100), 600, 800)
        assert ov.height == pytest.approx(800.0)
        assert ov.width == pytest.approx(400.0)
        assert ov.is_within_bounds()

    @pytest.mark.parametrize("w,h", [(0, 800), (600, 0), (-1, 10)])
    def test_unmeasurable_container(self, w, h):
        assert initial_overlay(_asset(), w, h) is None


class TestDrag:
    def test_drag_inside(self):
        ov = apply_drag(_overlay(), DragGesture(50, 100))
        assert (ov.x, ov.y) == (50, 100)

    def test_drag_clamped(self):
        ov = apply_drag(_overlay(), DragGesture(10_000, -50))
        assert ov.right == pytest.approx(600.0)
        assert ov.y == 0


class TestResize:
    def test_bottom_right_keeps_top_left(self):
        ov = apply_resize(_overlay(), ResizeGesture(ResizeHandle.BOTTOM_RIGHT, 0, 0, 300, 100))
        assert (ov.x, ov.y) == (100, 100)
        assert ov.width == pytest.approx(300.0)
        assert ov.height == pytest.approx(100.0)

    def test_top_left_keeps_bottom_right(self):
        before = _overlay()
        ov = apply_resize(before, ResizeGesture(ResizeHandle.TOP_LEFT, 0, 0, 90, 30))
        assert ov.right == pytest.approx(before.right)
        assert ov.bottom == pytest.approx(before.bottom)
        assert ov.width == pytest.approx(90.0)

    def test_top_right_keeps_bottom_left(self):
        before = _overlay()
        ov = apply_resize(before, ResizeGesture(ResizeHandle.TOP_RIGHT, 0, 0, 210, 70))
        assert ov.x == pytest.approx(before.x)
        assert ov.bottom == pytest.approx(before.bottom)

    def test_bottom_handle_driven_by_height(self):
        ov = apply_resize(_overlay(), ResizeGesture(ResizeHandle.BOTTOM, 100, 100, 150, 80))
        assert ov.height == pytest.approx(80.0)
        assert ov.width == pytest.approx(240.0)

    def test_corner_larger_relative_change_drives(self):
        # 宽度不变、高度翻倍：由高度驱动
        ov = apply_resize(_overlay(), ResizeGesture(ResizeHandle.BOTTOM_RIGHT, 100, 100, 150, 100))
        assert ov.height == pytest.approx(100.0)
        assert ov.width == pytest.approx(300.0)

    def test_grow_limited_by_available_space(self):
        ov = apply_resize(_overlay(), ResizeGesture(ResizeHandle.BOTTOM_RIGHT, 100, 100, 5000, 5000))
        assert ov.right == pytest.approx(600.0)
        assert (ov.x, ov.y) == (100, 100)
        assert ov.is_within_bounds()

    def test_minimum_width(self):
        ov = apply_resize(_overlay(), ResizeGesture(ResizeHandle.RIGHT, 100, 100, 1, 1))
        assert ov.width == pytest.approx(16.0)


def test_random_gesture_sequences_keep_invariants():
    rng = random.Random(20240601)
    handles = list(ResizeHandle)
    ov = initial_overlay(_asset(120, 40), 600, 800)
    for _ in range(500):
        if rng.random() < 0.5:
            ov = apply_drag(ov, DragGesture(rng.uniform(-300, 900), rng.uniform(-300, 1100)))
        else:
            ov = apply_resize(
                ov,
                ResizeGesture(rng.choice(handles), 0, 0, rng.uniform(-50, 900), rng.uniform(-50, 900)),
            )
        assert ov.is_within_bounds()
        assert ov.width / ov.height == pytest.approx(3.0)


class TestController:
    def test_lazy_init_and_per_page_independence(self):
        asset = _asset()
        c1, c2 = OverlayController(_page(1)), OverlayController(_page(2))
        c1.ensure_initialized(asset)
        c2.ensure_initialized(asset)
        c1.drag(50, 100)
        assert (c1.overlay.x, c1.overlay.y) == (50, 100)
        assert (c2.overlay.x, c2.overlay.y) == (0, 0)

    def test_init_only_once_for_same_asset(self):
        asset = _asset()
        ctrl = OverlayController(_page())
        ctrl.ensure_initialized(asset)
        ctrl.drag(40, 40)
        ctrl.ensure_initialized(asset)
        assert (ctrl.overlay.x, ctrl.overlay.y) == (40, 40)

    def test_new_asset_reinitializes(self):
        ctrl = OverlayController(_page())
        ctrl.ensure_initialized(_asset(120, 40))
        ctrl.drag(40, 40)
        ov = ctrl.ensure_initialized(_asset(100, 100))
        assert (ov.x, ov.y) == (0, 0)
        assert ov.aspect_ratio == pytest.approx(1.0)

    def test_unmeasurable_container_defers(self):
        ctrl = OverlayController(_page(), container=(0, 0))
        assert ctrl.ensure_initialized(_asset()) is None
        with pytest.raises(RuntimeError):
            ctrl.drag(1, 1)

    def test_rebind_and_reset(self):
        asset = _asset()
        ctrl = OverlayController(_page())
        ctrl.ensure_initialized(asset)
        ctrl.drag(40, 40)
        assert (ctrl.rebind(asset).x, ctrl.overlay.y) == (0, 0)
        ctrl.reset()
        assert ctrl.overlay is None and ctrl.asset is None

import pytest

from pdf_signer.components import clamp_coords, clamp_rect_position, fit_size_within


def test_clamp_basic_center():
    x, y = clamp_coords(50, 60, page_width=200, page_height=100, margin=2)
    assert (x, y) == (50, 60)


def test_clamp_left_top_margin():
    x, y = clamp_coords(-10, -5, page_width=200, page_height=100, margin=2)
    assert (x, y) == (2, 2)


class TestClampRectPosition:
    def test_inside_unchanged(self):
        assert clamp_rect_position(10, 20, 50, 30, 200, 100) == (10, 20)

    def test_right_bottom_overflow(self):
        # 最大左上角 = (200-50, 100-30)
        assert clamp_rect_position(190, 95, 50, 30, 200, 100) == (150, 70)

    def test_negative_clamped_to_origin(self):
        assert clamp_rect_position(-5, -8, 50, 30, 200, 100) == (0, 0)

    def test_rect_larger_than_bounds(self):
        assert clamp_rect_position(10, 10, 300, 300, 200, 100) == (0, 0)


class TestFitSizeWithin:
    def test_width_fits(self):
        assert fit_size_within(100, 2.0, 200, 200) == (100, 50)

    def test_height_limits(self):
        # 宽 160 推出高 80 > 40，按高度缩小：宽 = 40 * 2
        w, h = fit_size_within(160, 2.0, 200, 40)
        assert (w, h) == (80, 40)

    def test_width_limits(self):
        assert fit_size_within(500, 1.0, 120, 300) == (120, 120)

    def test_invalid_aspect(self):
        with pytest.raises(ValueError):
            fit_size_within(10, 0, 100, 100)

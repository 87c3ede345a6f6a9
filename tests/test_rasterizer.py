from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from conftest import build_pdf_bytes
from pdf_signer.components import DecodeError, RenderSurfaceError
from pdf_signer.processors import rasterizer
from pdf_signer.processors.rasterizer import effective_scale, rasterize_document, rasterize_pdf


def test_effective_scale_defaults_and_fallback():
    assert effective_scale() == 2.0
    assert effective_scale(1.5, 2.0) == 3.0
    assert effective_scale(0, 2.0) == 2.0


def test_pages_are_ordered_png_at_scale():
    pages = rasterize_pdf(build_pdf_bytes(3, size=(200, 300)), "doc")
    assert [p.page_number for p in pages] == [1, 2, 3]
    first = pages[0]
    assert first.document_name == "doc"
    assert (first.bitmap_width, first.bitmap_height) == (400, 600)
    assert first.container_size == (200.0, 300.0)
    with Image.open(BytesIO(first.bitmap)) as img:
        assert img.format == "PNG"
        assert img.size == (400, 600)


def test_device_pixel_ratio_scales_bitmap():
    pages = rasterize_pdf(build_pdf_bytes(1, size=(100, 100)), "doc", device_pixel_ratio=2.0)
    assert (pages[0].bitmap_width, pages[0].bitmap_height) == (400, 400)
    assert pages[0].container_size == (200.0, 200.0)


def test_progress_callback_sequential():
    seen = []
    rasterize_pdf(build_pdf_bytes(3), "doc", on_page=lambda n, total: seen.append((n, total)))
    assert seen == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.parametrize("content", [b"", b"not a pdf at all"])
def test_invalid_pdf_raises_decode_error(content):
    with pytest.raises(DecodeError):
        rasterize_pdf(content, "bad")


def test_surface_failure_fails_whole_document(monkeypatch):
    calls = []
    original = rasterizer.render_page_to_png

    def flaky(page, scale):
        calls.append(page.number)
        if page.number == 1:
            raise RenderSurfaceError("no surface")
        return original(page, scale)

    monkeypatch.setattr(rasterizer, "render_page_to_png", flaky)
    with pytest.raises(RenderSurfaceError):
        rasterize_pdf(build_pdf_bytes(3), "doc")
    # 第 2 页失败后不再渲染第 3 页
    assert calls == [0, 1]


def test_rasterize_document_reads_file(make_pdf):
    path = make_pdf("contract.v1.pdf", pages=2)
    doc = rasterize_document(path)
    assert doc.display_name == "contract.v1"
    assert doc.page_count == 2
    assert doc.page(2).page_number == 2
    with pytest.raises(IndexError):
        doc.page(3)

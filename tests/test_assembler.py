"""
文件路径：tests/test_assembler.py

用例目的：
- K 张快照 -> K 页 A4 纵向 PDF，顺序与输入一致；
- 图片宽度铺满页面、高度按宽高比推导；
- 空序列、截取失败时整体中止，目标路径不产生文件。
"""

from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image
from PyPDF2 import PdfReader

from pdf_signer.components import AssemblyError, CaptureError
from pdf_signer.models import Snapshot
from pdf_signer.processors.assembler import (
    assemble_pdf,
    count_pdf_pages,
    export_snapshots,
    image_box,
    save_pdf,
)
from pdf_signer.variables import CONST_OUTPUT_PAGE_SIZE


def _snapshot(w=400, h=600, n=1, color=(255, 255, 255)) -> Snapshot:
    buf = BytesIO()
    Image.new("RGB", (w, h), color).save(buf, format="JPEG", quality=100)
    return Snapshot(image_bytes=buf.getvalue(), width=w, height=h, document_name="doc", page_number=n)


@pytest.mark.parametrize("k", [1, 2, 5])
def test_page_count_and_a4_size(k):
    data = assemble_pdf(_snapshot(n=i + 1) for i in range(k))
    reader = PdfReader(BytesIO(data))
    assert len(reader.pages) == k
    for page in reader.pages:
        assert float(page.mediabox.width) == pytest.approx(CONST_OUTPUT_PAGE_SIZE[0], abs=0.01)
        assert float(page.mediabox.height) == pytest.approx(CONST_OUTPUT_PAGE_SIZE[1], abs=0.01)


def test_pages_follow_input_order():
    import fitz

    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    data = assemble_pdf(_snapshot(n=i + 1, color=c) for i, c in enumerate(colors))

    rendered = []
    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            pix = page.get_pixmap()
            rendered.append(Image.open(BytesIO(pix.tobytes("png"))).convert("RGB").getpixel((100, 100)))

    assert len(rendered) == len(colors)
    for got, want in zip(rendered, colors):
        assert all(abs(g - w) < 40 for g, w in zip(got, want)), (got, want)


def test_image_box_full_width():
    w, h = image_box(400, 600, 595.0)
    assert w == 595.0
    assert h == pytest.approx(892.5)


def test_image_box_rejects_empty_snapshot():
    with pytest.raises(AssemblyError):
        image_box(0, 10, 595.0)


def test_empty_sequence_rejected():
    with pytest.raises(AssemblyError):
        assemble_pdf([])


def test_capture_failure_aborts_assembly(tmp_path):
    def snapshots():
        yield _snapshot(n=1)
        raise CaptureError("boom")

    with pytest.raises(AssemblyError):
        export_snapshots(snapshots(), "doc", output_dir=tmp_path)
    assert not (tmp_path / "doc_signed.pdf").exists()


def test_export_snapshots_names_and_result(tmp_path):
    result = export_snapshots([_snapshot(n=1), _snapshot(n=2)], "doc", output_dir=tmp_path)
    assert result.path == tmp_path / "doc_signed.pdf"
    assert result.page_count == 2
    assert result.size_bytes == result.path.stat().st_size

    single = export_snapshots([_snapshot(n=2)], "doc", output_dir=tmp_path, page_number=2)
    assert single.filename == "doc Page 2_signed.pdf"
    assert single.page_count == 1


def test_save_pdf_leaves_no_temp_file(tmp_path):
    data = assemble_pdf([_snapshot()])
    target = save_pdf(data, tmp_path / "x_signed.pdf")
    assert count_pdf_pages(target.read_bytes()) == 1
    assert [p.name for p in tmp_path.iterdir()] == ["x_signed.pdf"]

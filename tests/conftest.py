from __future__ import annotations

"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from pdf_signer...` 可被导入；
并提供用 ReportLab 生成测试 PDF、用 Pillow 生成签名图片的夹具。
"""

import sys
from io import BytesIO
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


def build_pdf_bytes(pages: int, size=(200.0, 300.0)) -> bytes:
    """生成 N 页 PDF，每页写一行页码文字，页面尺寸较小以加快渲染。"""
    from reportlab.pdfgen import canvas

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    for i in range(pages):
        c.drawString(20, size[1] - 40, f"page {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def build_signature_png(width: int = 120, height: int = 40, mode: str = "RGBA") -> bytes:
    from PIL import Image

    color = (200, 0, 0, 255) if mode == "RGBA" else (200, 0, 0)
    img = Image.new(mode, (width, height), color)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_pdf(tmp_path):
    """返回工厂：make_pdf("doc.pdf", pages=2) -> 文件路径。"""

    def _make(name: str = "doc.pdf", pages: int = 1, size=(200.0, 300.0)) -> Path:
        path = tmp_path / name
        path.write_bytes(build_pdf_bytes(pages, size))
        return path

    return _make


@pytest.fixture
def signature_asset():
    from pdf_signer.models import SignatureAsset

    return SignatureAsset(image_bytes=build_signature_png(120, 40), natural_width=120, natural_height=40, source="test")


@pytest.fixture
def signature_file(tmp_path):
    path = tmp_path / "sign.png"
    path.write_bytes(build_signature_png(120, 40))
    return path

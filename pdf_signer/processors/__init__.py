"""
文件路径：pdf_signer/processors/__init__.py

说明：
- 流水线四个处理阶段，按数据流向排列：
  - rasterizer.py（PDF -> 逐页 PNG 位图，PyMuPDF）
  - overlay.py（单页签名框的拖动/缩放状态机）
  - compositor.py（页面位图 + 签名 -> JPEG 快照，Pillow）
  - assembler.py（快照 -> A4 多页 PDF，ReportLab + PyPDF2）
- 各阶段只通过 pdf_signer.models 中的数据对象衔接。
"""

from typing import List

__all__: List[str] = []

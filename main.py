"""
文件路径：main.py

命令行入口：
- 功能：把一个或多个 PDF 逐页渲染为位图，在指定页放置签名图片，重新组装为 `<名称>_signed.pdf`。
- 依赖：`pdf_signer/orchestrator.py`、`pdf_signer/data_handler.py`、`pdf_signer/components`、`pdf_signer/variables.py`。

快速使用示例：
    # 1) 整份导出（签名放在每页左上角，宽度为页面的 80%）
    python main.py --input contract.pdf --signature sign.png

    # 2) 第 1 页签名移到 (50, 100)，宽度 160；第 3 页移到 (300, 700)
    python main.py --input contract.pdf --signature sign.png --place 1:50,100,160 --place 3:300,700

    # 3) 只导出第 1、3 页，每页单独成文件（contract Page 1_signed.pdf ...）
    python main.py --input contract.pdf --pages 1,3

    # 4) 启动图形界面
    python main.py --gui

运行说明：
- 未指定 --signature 时使用 assets/signature.png（若存在），否则输出不含签名；
- --place 坐标单位为页面渲染坐标（左上为原点，与 PDF pt 在设备像素比为 1 时一致），可重复；
- 任一文档失败时退出码为 1，其余文档照常导出。

变量引用说明（来自 pdf_signer/variables.py）：
- CONST_DEVICE_PIXEL_RATIO, CONST_LOG_PYMUPDF_CAPABILITIES_ON_STARTUP, PATH_OUTPUT_DIR

组件调用说明（来自 pdf_signer/components / pdf_signer/data_handler.py / pdf_signer/orchestrator.py）：
- get_logger, FileHandler.ensure_project_dirs, parse_page_selection
- fetch_default_signature, load_signature_asset, load_pdf_documents
- BatchOrchestrator.start_batch / wait / controller / export_document / export_page
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from pdf_signer.components import FileHandler, SignerError, get_logger, parse_page_selection
from pdf_signer.data_handler import fetch_default_signature, load_pdf_documents, load_signature_asset
from pdf_signer.models import ExportResult, SignatureAsset
from pdf_signer.orchestrator import BatchOrchestrator
from pdf_signer.processors.overlay import ResizeHandle
from pdf_signer.variables import (
    CONST_DEVICE_PIXEL_RATIO,
    CONST_LOG_PYMUPDF_CAPABILITIES_ON_STARTUP,
    PATH_OUTPUT_DIR,
)


logger = get_logger(__name__)


@dataclass(frozen=True)
class Placement:
    """--place 参数：页码（1 基）、左上角、可选宽度。"""

    page_number: int
    x: float
    y: float
    width: Optional[float] = None


def _log_runtime_capabilities() -> None:
    """启动时输出运行环境信息：PyMuPDF 版本。"""
    if not CONST_LOG_PYMUPDF_CAPABILITIES_ON_STARTUP:
        return
    try:
        import fitz  # type: ignore

        version = getattr(fitz, "VersionBind", None) or getattr(fitz, "__doc__", "") or "unknown"
        logger.info("运行环境：PyMuPDF version=%s", version)
    except Exception as exc:  # noqa: BLE001
        logger.warning("无法检测 PyMuPDF 运行环境：%s", exc)


def parse_placement(text: str) -> Placement:
    """解析 `PAGE:X,Y[,W]`，如 `1:50,100` 或 `2:300,700,160`。"""
    try:
        page_s, coords = text.split(":", 1)
        parts = [float(p) for p in coords.split(",")]
        page_number = int(page_s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--place 需为 PAGE:X,Y[,W] 格式：{text}") from exc
    if len(parts) not in (2, 3) or page_number < 1:
        raise argparse.ArgumentTypeError(f"--place 需为 PAGE:X,Y[,W] 格式：{text}")
    return Placement(page_number, parts[0], parts[1], parts[2] if len(parts) == 3 else None)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PDF 签名工具（逐页渲染 + 签名叠加 + 重新组装）")
    parser.add_argument("--input", type=Path, nargs="+", default=None, help="输入 PDF 路径（可多个）")
    parser.add_argument("--signature", type=Path, default=None, help="签名图片路径（默认 assets/signature.png）")
    parser.add_argument("--place", type=parse_placement, action="append", default=None, help="签名位置 PAGE:X,Y[,W]，可重复")
    parser.add_argument("--pages", type=str, default=None, help="只导出所选页（每页单独成文件）：'all' 或 '1,3-5'")
    parser.add_argument("--output-dir", dest="output_dir", type=Path, default=PATH_OUTPUT_DIR, help="输出目录（默认 output/）")
    parser.add_argument("--dpr", type=float, default=CONST_DEVICE_PIXEL_RATIO, help="设备像素比（渲染比例 = dpr × 2）")
    parser.add_argument("--gui", action="store_true", help="启动图形界面（tkinter）")
    return parser.parse_args(argv)


def _resolve_signature(path: Optional[Path]) -> Optional[SignatureAsset]:
    if path is None:
        return fetch_default_signature()
    try:
        return load_signature_asset(path)
    except SignerError as exc:
        # 签名不可用时降级为无签名输出
        logger.error("%s，将不叠加签名", exc)
        return None


def _apply_placements(orch: BatchOrchestrator, doc_index: int, placements: Sequence[Placement]) -> None:
    _, controllers = orch.groups()[doc_index]
    for item in placements:
        if item.page_number > len(controllers):
            logger.warning("页码越界，已忽略 --place %s", item.page_number)
            continue
        ctrl = orch.controller(doc_index, item.page_number)
        if ctrl.overlay is None:
            continue
        if item.width is not None:
            ov = ctrl.overlay
            ctrl.resize(ResizeHandle.BOTTOM_RIGHT, ov.x, ov.y, item.width, item.width / ov.aspect_ratio)
        ctrl.drag(item.x, item.y)


def run(args: argparse.Namespace) -> int:
    FileHandler.ensure_project_dirs()
    if not args.input:
        print("请通过 --input 指定至少一个 PDF，或使用 --gui 启动界面")
        return 2
    try:
        items = load_pdf_documents(args.input)
    except (OSError, ValueError) as exc:
        print(f"输入无效：{exc}")
        return 2

    orch = BatchOrchestrator(device_pixel_ratio=args.dpr)
    try:
        orch.set_signature(_resolve_signature(args.signature))
        orch.start_batch(path for path, _ in items)
        orch.wait()

        outputs: List[ExportResult] = []
        failed = [path.name for path, _ in orch.errors()]
        for doc_index, (document, controllers) in enumerate(orch.groups()):
            _apply_placements(orch, doc_index, args.place or [])
            try:
                if args.pages:
                    for idx in parse_page_selection(args.pages, len(controllers)):
                        outputs.append(orch.export_page(doc_index, idx + 1, args.output_dir))
                else:
                    outputs.append(orch.export_document(doc_index, args.output_dir))
            except (SignerError, OSError) as exc:
                logger.error("导出失败：%s：%s", document.display_name, exc)
                failed.append(document.display_name)
    finally:
        orch.close()

    for result in outputs:
        print(f"已保存：{result.path}（{result.page_count} 页）")
    if failed:
        print(f"失败：{len(failed)} 项 -> {', '.join(failed)}")
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    _log_runtime_capabilities()
    args = parse_args(argv)
    if args.gui:
        # 延迟导入以加快 CLI 冷启动
        from pdf_signer.ui import run_app

        run_app()
        return 0
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

"""
文件路径：pdf_signer/ui.py

模块职责：
- 提供 tkinter 图形界面：顶部导航 + 上传工具栏 + 可滚动的文档分组列表 + 底部状态栏。
- 与业务层解耦：界面只调用 data_handler 与 BatchOrchestrator 的公共 API。

交互说明：
- 未设置签名前“上传 PDF”按钮不可用；存在默认签名时不显示“上传签名”按钮；
- 批次渲染期间显示“渲染中…”，通过 after 轮询批次状态，不阻塞界面；
- 导出在线程池中执行，期间显示“导出中…”并禁用下载按钮，同样以 after 轮询结果；
- 每页预览为一个 Canvas：拖动签名框移动位置，拖动右下角手柄缩放（锁定宽高比）；
  松开鼠标时才把手势提交给该页的 OverlayController；
- 预览坐标与容器坐标之间按固定比例换算（预览宽度 / 容器宽度）。

变量引用说明（来自 pdf_signer/variables.py）：
- STYLE_GUI_*，CONST_UI_POLL_INTERVAL_MS，PATH_OUTPUT_DIR

给零基础用户的小提示（仅注释）：
- 打开 GUI 的方式：在命令行运行 `python main.py --gui` 即可启动界面。
"""

from __future__ import annotations

import tkinter as tk
from concurrent.futures import Future
from io import BytesIO
from pathlib import Path
from tkinter import filedialog, messagebox
from typing import List, Optional

from PIL import Image, ImageTk

from .components import FileHandler, SignatureLoadError, SignerError, get_logger
from .data_handler import fetch_default_signature, load_pdf_documents, load_signature_asset
from .models import ExportResult, SignatureAsset
from .orchestrator import BatchOrchestrator
from .processors.overlay import OverlayController, ResizeHandle
from .variables import (
    CONST_UI_POLL_INTERVAL_MS,
    PATH_OUTPUT_DIR,
    STYLE_GUI_ACCENT_BLUE,
    STYLE_GUI_BG,
    STYLE_GUI_CARD_BG,
    STYLE_GUI_DANGER_RED,
    STYLE_GUI_DIVIDER,
    STYLE_GUI_FONT_FAMILY,
    STYLE_GUI_FONT_SIZE_BODY,
    STYLE_GUI_FONT_SIZE_TITLE,
    STYLE_GUI_HANDLE_FILL,
    STYLE_GUI_HANDLE_SIZE,
    STYLE_GUI_MUTED_GRAY,
    STYLE_GUI_OVERLAY_OUTLINE,
    STYLE_GUI_PREVIEW_WIDTH,
    STYLE_GUI_PRIMARY_COLOR,
    STYLE_GUI_SUCCESS_GREEN,
    STYLE_GUI_WINDOW_MIN_HEIGHT,
    STYLE_GUI_WINDOW_MIN_WIDTH,
)


logger = get_logger(__name__)

_USE_DEFAULT = object()


class PagePreview:
    """单页预览：页面位图 + 可拖动/缩放的签名框。"""

    def __init__(self, parent: tk.Widget, controller: OverlayController, width: int = STYLE_GUI_PREVIEW_WIDTH) -> None:
        self.controller = controller
        cw, ch = controller.container
        self.scale = float(width) / cw
        self.width = int(width)
        self.height = max(1, int(round(ch * self.scale)))
        self.canvas = tk.Canvas(parent, width=self.width, height=self.height, bg="#FFFFFF", highlightthickness=1)
        self._page_tk: Optional[ImageTk.PhotoImage] = None
        self._sig_tk: Optional[ImageTk.PhotoImage] = None
        self._mode: Optional[str] = None
        self._press = (0.0, 0.0)

        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_motion)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.redraw()

    def redraw(self) -> None:
        c = self.canvas
        c.delete("all")
        if self._page_tk is None:
            with Image.open(BytesIO(self.controller.page.bitmap)) as src:
                img = src.convert("RGB").resize((self.width, self.height), resample=Image.Resampling.LANCZOS)
            self._page_tk = ImageTk.PhotoImage(img)
        c.create_image(0, 0, image=self._page_tk, anchor="nw")

        overlay = self.controller.overlay
        asset = self.controller.asset
        if overlay is None or asset is None:
            self._sig_tk = None
            return
        x0, y0 = overlay.x * self.scale, overlay.y * self.scale
        w, h = max(1, int(round(overlay.width * self.scale))), max(1, int(round(overlay.height * self.scale)))
        with Image.open(BytesIO(asset.image_bytes)) as src:
            sig = src.convert("RGBA").resize((w, h), resample=Image.Resampling.LANCZOS)
        self._sig_tk = ImageTk.PhotoImage(sig)
        c.create_image(x0, y0, image=self._sig_tk, anchor="nw", tags=("overlay",))
        c.create_rectangle(x0, y0, x0 + w, y0 + h, outline=STYLE_GUI_OVERLAY_OUTLINE, dash=(4, 2), tags=("overlay", "outline"))
        hs = STYLE_GUI_HANDLE_SIZE
        c.create_rectangle(
            x0 + w - hs, y0 + h - hs, x0 + w, y0 + h,
            fill=STYLE_GUI_HANDLE_FILL, outline="", tags=("overlay", "handle"),
        )

    # 手势提交：参数为预览像素位移
    def commit_drag(self, dx: float, dy: float) -> None:
        overlay = self.controller.overlay
        if overlay is None:
            return
        self.controller.drag(overlay.x + dx / self.scale, overlay.y + dy / self.scale)
        self.redraw()

    def commit_resize(self, dx: float, dy: float) -> None:
        overlay = self.controller.overlay
        if overlay is None:
            return
        self.controller.resize(
            ResizeHandle.BOTTOM_RIGHT,
            overlay.x,
            overlay.y,
            overlay.width + dx / self.scale,
            overlay.height + dy / self.scale,
        )
        self.redraw()

    def _hit(self, x: float, y: float) -> Optional[str]:
        overlay = self.controller.overlay
        if overlay is None:
            return None
        x0, y0, x1, y1 = (v * self.scale for v in overlay.rect)
        hs = STYLE_GUI_HANDLE_SIZE
        if x1 - hs <= x <= x1 and y1 - hs <= y <= y1:
            return "resize"
        if x0 <= x <= x1 and y0 <= y <= y1:
            return "drag"
        return None

    def _on_press(self, e) -> None:
        self._mode = self._hit(e.x, e.y)
        self._press = (e.x, e.y)

    def _on_motion(self, e) -> None:
        if self._mode is None:
            return
        dx, dy = e.x - self._press[0], e.y - self._press[1]
        overlay = self.controller.overlay
        x0, y0 = overlay.x * self.scale, overlay.y * self.scale
        x1, y1 = overlay.right * self.scale, overlay.bottom * self.scale
        # 拖动过程中只移动虚线框，松开时再提交
        if self._mode == "drag":
            self.canvas.coords("outline", x0 + dx, y0 + dy, x1 + dx, y1 + dy)
        else:
            self.canvas.coords("outline", x0, y0, x1 + dx, y1 + dy)

    def _on_release(self, e) -> None:
        mode, self._mode = self._mode, None
        dx, dy = e.x - self._press[0], e.y - self._press[1]
        if mode == "drag":
            self.commit_drag(dx, dy)
        elif mode == "resize":
            self.commit_resize(dx, dy)


class PdfSignerApp(tk.Tk):
    """tkinter 图形界面主应用。"""

    def __init__(self, orchestrator: Optional[BatchOrchestrator] = None, signature=_USE_DEFAULT) -> None:
        super().__init__()
        self.title("PDF 签名工具")
        self.minsize(STYLE_GUI_WINDOW_MIN_WIDTH, STYLE_GUI_WINDOW_MIN_HEIGHT)
        self.configure(bg=STYLE_GUI_BG)

        FileHandler.ensure_project_dirs()

        self.orchestrator = orchestrator or BatchOrchestrator()
        self.default_signature: Optional[SignatureAsset] = (
            fetch_default_signature() if signature is _USE_DEFAULT else signature
        )
        self.previews: List[List[PagePreview]] = []
        self.last_output: Optional[Path] = None
        self.output_dir: Path = PATH_OUTPUT_DIR
        self._download_buttons: List[tk.Button] = []
        self._export_future: Optional[Future] = None

        self._build_top_nav()
        self._build_toolbar()
        self._build_groups_area()
        self._build_bottom_bar()

        if self.default_signature is not None:
            self._apply_signature(self.default_signature)
        self._refresh_upload_state()
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # -----------------------------
    # 构建 UI
    # -----------------------------
    def _build_top_nav(self) -> None:
        bar = tk.Frame(self, bg=STYLE_GUI_PRIMARY_COLOR, height=44)
        bar.pack(side=tk.TOP, fill=tk.X)
        tk.Label(
            bar,
            text="PDF 签名工具",
            fg="#FFFFFF",
            bg=STYLE_GUI_PRIMARY_COLOR,
            font=(STYLE_GUI_FONT_FAMILY, STYLE_GUI_FONT_SIZE_TITLE, "bold"),
        ).pack(side=tk.LEFT, padx=12)
        tk.Button(
            bar,
            text="帮助",
            command=self._on_help,
            bg=STYLE_GUI_PRIMARY_COLOR,
            fg="#FFFFFF",
            bd=0,
            activebackground=STYLE_GUI_ACCENT_BLUE,
            cursor="hand2",
        ).pack(side=tk.RIGHT, padx=6, pady=6)

    def _build_toolbar(self) -> None:
        bar = tk.Frame(self, bg=STYLE_GUI_CARD_BG)
        bar.pack(side=tk.TOP, fill=tk.X)
        font = (STYLE_GUI_FONT_FAMILY, STYLE_GUI_FONT_SIZE_BODY)

        self.btn_signature = tk.Button(bar, text="上传签名", command=self._on_upload_signature, font=font)
        self.btn_pdfs = tk.Button(
            bar,
            text="上传 PDF",
            command=self._on_upload_pdfs,
            font=font,
            bg=STYLE_GUI_SUCCESS_GREEN,
            fg="#FFFFFF",
        )
        if self.default_signature is None:
            self.btn_signature.pack(side=tk.LEFT, padx=8, pady=8)
        self.btn_pdfs.pack(side=tk.LEFT, padx=8, pady=8)

        self.var_loading = tk.StringVar(value="")
        tk.Label(bar, textvariable=self.var_loading, bg=STYLE_GUI_CARD_BG, fg=STYLE_GUI_MUTED_GRAY, font=font).pack(
            side=tk.LEFT, padx=12
        )

    def _build_groups_area(self) -> None:
        body = tk.Frame(self, bg=STYLE_GUI_BG)
        body.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self._scroll_canvas = tk.Canvas(body, bg=STYLE_GUI_BG, highlightthickness=0)
        scrollbar = tk.Scrollbar(body, orient=tk.VERTICAL, command=self._scroll_canvas.yview)
        self._scroll_canvas.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self._scroll_canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.groups_frame = tk.Frame(self._scroll_canvas, bg=STYLE_GUI_BG)
        self._scroll_canvas.create_window((0, 0), window=self.groups_frame, anchor="nw")
        self.groups_frame.bind(
            "<Configure>",
            lambda e: self._scroll_canvas.configure(scrollregion=self._scroll_canvas.bbox("all")),
        )

    def _build_bottom_bar(self) -> None:
        bar = tk.Frame(self, bg=STYLE_GUI_DIVIDER)
        bar.pack(side=tk.BOTTOM, fill=tk.X)
        self.var_status = tk.StringVar(value="就绪")
        tk.Label(bar, textvariable=self.var_status, bg=STYLE_GUI_DIVIDER, anchor="w").pack(side=tk.LEFT, padx=8, pady=4)

    # -----------------------------
    # 签名与上传
    # -----------------------------
    def _apply_signature(self, asset: SignatureAsset) -> None:
        self.orchestrator.set_signature(asset)
        for row in self.previews:
            for preview in row:
                preview.redraw()
        self._refresh_upload_state()

    def _refresh_upload_state(self) -> None:
        state = tk.NORMAL if self.orchestrator.signature is not None else tk.DISABLED
        self.btn_pdfs.configure(state=state)

    def _on_help(self) -> None:
        messagebox.showinfo("帮助", "1) 上传签名  2) 上传 PDF  3) 拖动/缩放签名框  4) 下载")

    def _on_upload_signature(self) -> None:
        path = filedialog.askopenfilename(
            title="选择签名图片",
            filetypes=[("Images", "*.png *.jpg *.jpeg *.gif *.bmp *.webp"), ("All Files", "*.*")],
        )
        if not path:
            return
        try:
            asset = load_signature_asset(Path(path))
        except SignatureLoadError as exc:
            logger.error("%s", exc)
            messagebox.showerror("错误", f"签名图片加载失败：{exc.message}")
            return
        self._apply_signature(asset)
        self.var_status.set(f"签名图片：{Path(path).name}")

    def _on_upload_pdfs(self) -> None:
        paths = filedialog.askopenfilenames(title="选择 PDF 文件", filetypes=[("PDF Files", "*.pdf")])
        if paths:
            self.start_batch([Path(p) for p in paths])

    def start_batch(self, paths: List[Path]) -> int:
        try:
            items = load_pdf_documents(paths)
        except (OSError, ValueError) as exc:
            messagebox.showerror("错误", str(exc))
            return self.orchestrator.batch_id
        self.previews = []
        batch_id = self.orchestrator.start_batch(p for p, _ in items)
        self.var_loading.set("渲染中…")
        self.after(CONST_UI_POLL_INTERVAL_MS, self._poll_batch, batch_id)
        return batch_id

    def _poll_batch(self, batch_id: int) -> None:
        if batch_id != self.orchestrator.batch_id:
            return
        if self.orchestrator.is_loading:
            self.after(CONST_UI_POLL_INTERVAL_MS, self._poll_batch, batch_id)
            return
        self.var_loading.set("")
        self.render_groups()

    # -----------------------------
    # 文档分组
    # -----------------------------
    def render_groups(self) -> None:
        """按上传顺序渲染当前批次；分组框登记在批次作用域，新批次开始时销毁。"""
        scope = self.orchestrator.scope
        self.previews = []
        self._download_buttons = []
        busy = tk.DISABLED if self._export_future is not None else tk.NORMAL
        for doc_index, (document, controllers) in enumerate(self.orchestrator.groups()):
            group = scope.acquire(
                tk.LabelFrame(self.groups_frame, text=document.display_name, bg=STYLE_GUI_CARD_BG),
                lambda w: w.destroy(),
            )
            group.pack(side=tk.TOP, fill=tk.X, padx=12, pady=8)
            btn = tk.Button(
                group,
                text="下载整份 PDF",
                bg=STYLE_GUI_DANGER_RED,
                fg="#FFFFFF",
                state=busy,
                command=lambda i=doc_index: self._on_export_document(i),
            )
            btn.pack(side=tk.TOP, anchor="e", padx=8, pady=6)
            self._download_buttons.append(btn)

            row: List[PagePreview] = []
            for ctrl in controllers:
                cell = tk.Frame(group, bg=STYLE_GUI_CARD_BG)
                cell.pack(side=tk.TOP, fill=tk.X, padx=8, pady=6)
                btn = tk.Button(
                    cell,
                    text="下载 PDF",
                    bg=STYLE_GUI_ACCENT_BLUE,
                    fg="#FFFFFF",
                    state=busy,
                    command=lambda i=doc_index, n=ctrl.page.page_number: self._on_export_page(i, n),
                )
                btn.pack(side=tk.TOP, anchor="w", pady=4)
                self._download_buttons.append(btn)
                preview = PagePreview(cell, ctrl)
                preview.canvas.pack(side=tk.TOP, anchor="w")
                row.append(preview)
            self.previews.append(row)

        for path, exc in self.orchestrator.errors():
            label = scope.acquire(
                tk.Label(self.groups_frame, text=f"{path.name}：{exc}", fg=STYLE_GUI_DANGER_RED, bg=STYLE_GUI_BG),
                lambda w: w.destroy(),
            )
            label.pack(side=tk.TOP, anchor="w", padx=12)

        summary = self.orchestrator.stats_summary()
        self.var_status.set(f"文档：{summary['documents']}  页数：{summary['pages']}  失败：{len(summary['failed'])}")

    def _after_export(self, result: ExportResult) -> None:
        self.last_output = result.path
        stats = self.orchestrator.last_export_stats or {}
        self.var_status.set(
            f"最新输出：{result.filename}（{result.page_count} 页，{result.size_bytes / 1024:.1f} KB，"
            f"{stats.get('elapsed_s', '-')} s）"
        )
        messagebox.showinfo("完成", f"已保存至：{result.path}")

    def _set_downloads_state(self, state: str) -> None:
        for btn in self._download_buttons:
            if btn.winfo_exists():
                btn.configure(state=state)

    def _start_export(self, job, *args) -> Optional[Future]:
        """截图与编码放到线程池执行；同一时间只允许一个导出任务。"""
        if self._export_future is not None:
            return None
        future = self.orchestrator.submit(job, *args)
        self._export_future = future
        self.var_loading.set("导出中…")
        self._set_downloads_state(tk.DISABLED)
        self.after(CONST_UI_POLL_INTERVAL_MS, self._poll_export, future)
        return future

    def _poll_export(self, future: Future) -> None:
        if future is not self._export_future:
            return
        if not future.done():
            self.after(CONST_UI_POLL_INTERVAL_MS, self._poll_export, future)
            return
        self._export_future = None
        self.var_loading.set("")
        self._set_downloads_state(tk.NORMAL)
        try:
            result = future.result()
        except (SignerError, OSError) as exc:
            messagebox.showerror("错误", f"导出失败：{exc}")
            return
        self._after_export(result)

    def _on_export_document(self, doc_index: int) -> Optional[Future]:
        return self._start_export(self.orchestrator.export_document, doc_index, self.output_dir)

    def _on_export_page(self, doc_index: int, page_number: int) -> Optional[Future]:
        return self._start_export(self.orchestrator.export_page, doc_index, page_number, self.output_dir)

    def _on_close(self) -> None:
        # 不等待进行中的光栅化，避免关闭窗口时界面卡住
        self.orchestrator.close(wait=False)
        self.destroy()


def run_app() -> None:
    app = PdfSignerApp()
    app.mainloop()


__all__ = ["PagePreview", "PdfSignerApp", "run_app"]

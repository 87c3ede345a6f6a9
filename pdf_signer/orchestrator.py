"""
文件路径：pdf_signer/orchestrator.py

模块职责：
- 批次编排：把一次上传的多个 PDF 分发给光栅化（文档之间并行，文档内部逐页串行）；
- 持有当前批次的会话状态（BatchState），并为每一页配备独立的 OverlayController；
- 导出：按文档分组截取快照，交给组装器生成 `<名称>_signed.pdf`。

并发约定：
- 每次上传分配新的 batch_id 与新的 BatchState，并整体替换旧状态；
- 线程池回调只在 batch_id 与当前批次一致时写入结果，过期批次的完成结果直接丢弃；
- 批次内所有文档都完成（成功或失败）后，一次性发布分组结果。

组件调用说明（来自 pdf_signer/components）：
- get_logger、ResourceScope、SignerError、parse_page_selection
"""

from __future__ import annotations

import itertools
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .components import ResourceScope, SignerError, get_logger
from .models import Document, ExportResult, SignatureAsset, Snapshot
from .processors.assembler import export_snapshots
from .processors.compositor import capture_snapshot
from .processors.overlay import OverlayController
from .processors.rasterizer import rasterize_document
from .variables import (
    CONST_DEVICE_PIXEL_RATIO,
    CONST_MAX_WORKERS,
    ERR_PAGE_INDEX_OUT_OF_RANGE,
    STATUS_ERROR,
    STATUS_PENDING,
    STATUS_SUCCESS,
)


logger = get_logger(__name__)

Rasterize = Callable[..., Document]


@dataclass
class DocumentResult:
    """单个上传文件的处理结果：成功时带 Document 与逐页控制器，失败时带异常。"""

    path: Path
    document: Optional[Document] = None
    error: Optional[BaseException] = None
    controllers: Tuple[OverlayController, ...] = ()

    @property
    def status(self) -> str:
        if self.error is not None:
            return STATUS_ERROR
        if self.document is not None:
            return STATUS_SUCCESS
        return STATUS_PENDING


@dataclass
class BatchState:
    """一次上传对应的会话状态，以 batch_id 标识。"""

    batch_id: int
    paths: Tuple[Path, ...]
    scope: ResourceScope
    results: List[Optional[DocumentResult]] = field(default_factory=list)
    published: Tuple[DocumentResult, ...] = ()
    settled: threading.Event = field(default_factory=threading.Event)

    @property
    def loading(self) -> bool:
        return not self.settled.is_set()


class BatchOrchestrator:
    """批次编排器。

    用法示例：
        orch = BatchOrchestrator()
        orch.set_signature(asset)
        orch.start_batch([Path("a.pdf"), Path("b.pdf")])
        orch.wait()
        orch.controller(0, 1).drag(50, 100)
        orch.export_document(0)
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        device_pixel_ratio: float = CONST_DEVICE_PIXEL_RATIO,
        rasterize: Rasterize = rasterize_document,
    ) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=CONST_MAX_WORKERS, thread_name_prefix="rasterize")
        self.device_pixel_ratio = device_pixel_ratio
        self._rasterize = rasterize
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._asset: Optional[SignatureAsset] = None
        self._state = BatchState(batch_id=0, paths=(), scope=ResourceScope("batch-0"))
        self._state.settled.set()
        # 最近一次导出统计：files/pages/elapsed_s/failed(list)
        self.last_export_stats: Optional[dict] = None

    # -----------------------------
    # 批次
    # -----------------------------
    @property
    def batch_id(self) -> int:
        return self._state.batch_id

    @property
    def scope(self) -> ResourceScope:
        """当前批次的资源作用域（GUI 图片等在此登记）。"""
        return self._state.scope

    @property
    def is_loading(self) -> bool:
        return self._state.loading

    def start_batch(self, paths: Iterable[Path]) -> int:
        """开始新批次并返回其 batch_id；旧批次的资源立即释放，其未完成结果将被丢弃。"""
        items = tuple(Path(p) for p in paths)
        batch_id = next(self._ids)
        state = BatchState(
            batch_id=batch_id,
            paths=items,
            scope=ResourceScope(f"batch-{batch_id}"),
            results=[None] * len(items),
        )
        with self._lock:
            previous, self._state = self._state, state
        previous.scope.close()
        logger.info("开始批次 #%s：%s 个文件", batch_id, len(items))

        if not items:
            state.settled.set()
            return batch_id
        for index, path in enumerate(items):
            future = self._executor.submit(self._rasterize, path, device_pixel_ratio=self.device_pixel_ratio)
            future.add_done_callback(partial(self._on_done, state, index, path))
        return batch_id

    def wait(self, timeout: Optional[float] = None) -> bool:
        """阻塞直到当前批次全部完成；超时返回 False。"""
        return self._state.settled.wait(timeout)

    def _on_done(self, state: BatchState, index: int, path: Path, future: Future) -> None:
        try:
            result = DocumentResult(path=path, document=future.result())
        except Exception as exc:  # noqa: BLE001
            # 单个文档失败不影响同批次其他文档
            code = getattr(exc, "err_code", "-")
            logger.error("[%s] 文档处理失败：%s：%s", code, path.name, exc)
            result = DocumentResult(path=path, error=exc)

        with self._lock:
            if state is not self._state:
                logger.info("丢弃过期批次 #%s 的结果：%s", state.batch_id, path.name)
                return
            state.results[index] = result
            if any(r is None for r in state.results):
                return
            self._publish(state)

    def _publish(self, state: BatchState) -> None:
        """为成功的文档创建逐页控制器并一次性发布（调用方持有锁）。"""
        for result in state.results:
            if result is None or result.document is None:
                continue
            controllers = []
            for page in result.document.pages:
                ctrl = state.scope.acquire(OverlayController(page), OverlayController.reset)
                ctrl.ensure_initialized(self._asset)
                controllers.append(ctrl)
            result.controllers = tuple(controllers)
        state.published = tuple(r for r in state.results if r is not None)
        state.settled.set()
        ok = sum(1 for r in state.published if r.status == STATUS_SUCCESS)
        logger.info("批次 #%s 完成：成功 %s / %s", state.batch_id, ok, len(state.published))

    def results(self) -> Tuple[DocumentResult, ...]:
        """当前批次全部文件的结果（按上传顺序）；批次未完成时为空。"""
        return self._state.published

    def groups(self) -> List[Tuple[Document, Tuple[OverlayController, ...]]]:
        """成功文档的 (Document, 逐页控制器) 分组，按上传顺序；doc_index 即此列表下标。"""
        return [(r.document, r.controllers) for r in self._state.published if r.document is not None]

    def errors(self) -> List[Tuple[Path, BaseException]]:
        return [(r.path, r.error) for r in self._state.published if r.error is not None]

    # -----------------------------
    # 签名与签名框
    # -----------------------------
    @property
    def signature(self) -> Optional[SignatureAsset]:
        return self._asset

    def set_signature(self, asset: Optional[SignatureAsset]) -> None:
        """所有页面共享同一签名图片；更换图片时重新初始化已有签名框。"""
        with self._lock:
            self._asset = asset
            for result in self._state.published:
                for ctrl in result.controllers:
                    if asset is None:
                        ctrl.reset()
                    else:
                        ctrl.ensure_initialized(asset)
        logger.info("签名图片已%s", "设置" if asset is not None else "清除")

    def _group(self, doc_index: int) -> Tuple[Document, Tuple[OverlayController, ...]]:
        groups = self.groups()
        if doc_index < 0 or doc_index >= len(groups):
            raise IndexError(f"[{ERR_PAGE_INDEX_OUT_OF_RANGE}] 文档序号越界：{doc_index} / {len(groups)}")
        return groups[doc_index]

    def controller(self, doc_index: int, page_number: int) -> OverlayController:
        document, controllers = self._group(doc_index)
        if page_number < 1 or page_number > len(controllers):
            raise IndexError(
                f"[{ERR_PAGE_INDEX_OUT_OF_RANGE}] 页码越界：{document.display_name} {page_number} / {len(controllers)}"
            )
        return controllers[page_number - 1]

    # -----------------------------
    # 导出
    # -----------------------------
    @staticmethod
    def _capture(controllers: Sequence[OverlayController]) -> List[Snapshot]:
        """先截取全部快照；任一页失败即抛出，整次导出中止。"""
        return [
            capture_snapshot(ctrl.page, ctrl.overlay, ctrl.asset, container=ctrl.container)
            for ctrl in controllers
        ]

    def _export(
        self,
        display_name: str,
        controllers: Sequence[OverlayController],
        output_dir: Optional[Path],
        page_number: Optional[int] = None,
    ) -> ExportResult:
        try:
            snapshots = self._capture(controllers)
            return export_snapshots(snapshots, display_name, output_dir=output_dir, page_number=page_number)
        except SignerError as exc:
            logger.error("[%s] 导出失败：%s：%s", exc.err_code, display_name, exc.message)
            raise

    def _record_stats(self, results: List[ExportResult], failed: List[str], started: float) -> None:
        self.last_export_stats = {
            "files": len(results),
            "pages": sum(r.page_count for r in results),
            "elapsed_s": round(time.perf_counter() - started, 3),
            "failed": list(failed),
        }

    def export_document(self, doc_index: int, output_dir: Optional[Path] = None) -> ExportResult:
        """整份导出：该文档所有页按页序组成一个 PDF。"""
        started = time.perf_counter()
        document, controllers = self._group(doc_index)
        try:
            result = self._export(document.display_name, controllers, output_dir)
        except SignerError:
            self._record_stats([], [document.display_name], started)
            raise
        self._record_stats([result], [], started)
        return result

    def export_page(self, doc_index: int, page_number: int, output_dir: Optional[Path] = None) -> ExportResult:
        """单页导出：`<名称> Page <n>_signed.pdf`。"""
        started = time.perf_counter()
        ctrl = self.controller(doc_index, page_number)
        name = self._group(doc_index)[0].display_name
        try:
            result = self._export(name, [ctrl], output_dir, page_number=page_number)
        except SignerError:
            self._record_stats([], [f"{name} #{page_number}"], started)
            raise
        self._record_stats([result], [], started)
        return result

    def export_all(self, output_dir: Optional[Path] = None) -> List[ExportResult]:
        """逐文档导出；单个文档失败只记录，不影响其余文档。"""
        started = time.perf_counter()
        exported: List[ExportResult] = []
        failed: List[str] = []
        for document, controllers in self.groups():
            try:
                exported.append(self._export(document.display_name, controllers, output_dir))
            except (SignerError, OSError) as exc:
                logger.warning("跳过导出失败的文档：%s（%s）", document.display_name, exc)
                failed.append(document.display_name)
        self._record_stats(exported, failed, started)
        return exported

    def stats_summary(self) -> Dict[str, object]:
        """供 GUI/CLI 展示的批次概况。"""
        published = self._state.published
        return {
            "batch_id": self._state.batch_id,
            "loading": self.is_loading,
            "documents": len(published),
            "pages": sum(len(r.controllers) for r in published),
            "failed": [r.path.name for r in published if r.error is not None],
        }

    def submit(self, fn: Callable[..., object], *args, **kwargs) -> Future:
        """把耗时任务（如 GUI 导出）交给同一线程池，调用方自行轮询 Future。"""
        return self._executor.submit(fn, *args, **kwargs)

    def close(self, wait: bool = True) -> None:
        """释放当前批次资源并关闭自有线程池。

        wait=False 时不等待进行中的光栅化，未开始的任务被取消；
        之后到达的完成回调因批次已被替换而按过期结果丢弃。
        """
        closed = BatchState(batch_id=next(self._ids), paths=(), scope=ResourceScope("closed"))
        closed.settled.set()
        with self._lock:
            previous, self._state = self._state, closed
        previous.scope.close()
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=not wait)


__all__ = ["DocumentResult", "BatchState", "BatchOrchestrator"]

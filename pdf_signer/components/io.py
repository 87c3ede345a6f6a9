"""
文件路径：pdf_signer/components/io.py

说明：临时资源的显式获取与释放。

- 每个批次拥有一个 ResourceScope，批次被新上传替换时统一关闭；
- 可登记任意释放回调（关闭文件句柄、删除临时文件、丢弃 GUI 图片对象等）；
- 释放顺序与登记顺序相反，单个回调失败只记录日志，不影响其余资源释放。
"""

from __future__ import annotations

import logging
import tempfile
import threading
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from ..variables import PATH_TEMP_DIR


T = TypeVar("T")


class ResourceScope:
    """一组随拥有者一起释放的临时资源。"""

    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._releasers: List[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def released(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._releasers)

    def acquire(self, resource: T, release: Callable[[T], None]) -> T:
        """登记资源及其释放方法，返回资源本身便于链式使用。

        作用域已关闭时立即释放并抛出 RuntimeError，避免资源泄漏到失效的批次。
        """
        with self._lock:
            if not self._closed:
                self._releasers.append(lambda: release(resource))
                return resource
        release(resource)
        raise RuntimeError(f"资源作用域已关闭：{self.name}")

    def temp_file(self, suffix: str = "", directory: Optional[Path] = None) -> Path:
        """创建登记在本作用域下的临时文件，关闭作用域时删除。"""
        target_dir = directory if directory is not None else PATH_TEMP_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=str(target_dir), suffix=suffix, delete=False) as f:
            path = Path(f.name)
        return self.acquire(path, lambda p: p.unlink(missing_ok=True))

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            releasers, self._releasers = self._releasers, []
        logger = logging.getLogger(__name__)
        for release in reversed(releasers):
            try:
                release()
            except Exception as exc:  # noqa: BLE001
                logger.warning("释放资源失败（%s）：%s", self.name, exc)

    def __enter__(self) -> "ResourceScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["ResourceScope"]

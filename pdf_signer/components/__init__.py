"""
文件路径：pdf_signer/components/__init__.py

说明：
- 通用组件包入口：日志、文件路径、重试机制，并聚合导出各子模块；
- 子模块按职责拆分：`coords.py`（坐标钳制）、`page.py`（页选择/页名）、
  `text.py`（文件名处理）、`io.py`（临时资源作用域）、`errors.py`（错误分类）；
- 业务模块与测试统一使用 `from pdf_signer.components import ...` 导入。
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Type

from ..variables import (
    PATH_LOGS_DIR,
    PATH_OUTPUT_DIR,
    PATH_TEMP_DIR,
    PATH_LOG_FILE,
    CONST_LOG_FORMAT,
    CONST_LOG_DATEFMT,
    CONST_ENCODING,
    CONST_MAX_RETRY,
    ERR_PATH_NOT_WRITABLE,
    ERR_FILE_NOT_FOUND,
)

# 聚合导出：拆分后的子模块
from .coords import clamp_coords, clamp_rect_position, fit_size_within
from .errors import (
    AssemblyError,
    CaptureError,
    DecodeError,
    ErrorHandler,
    RenderSurfaceError,
    SignatureLoadError,
    SignerError,
)
from .io import ResourceScope
from .page import page_display_name, parse_page_selection
from .text import display_name_from_filename, signed_filename


# =============================
# 日志工具
# =============================
_LOGGER_CONFIGURED: bool = False


def get_logger(name: str) -> logging.Logger:
    """获取 logger，首次调用时配置文件与控制台双输出。

    参数：
        name: 日志记录器名称（一般使用 __name__）。

    返回：
        logging.Logger 对象。
    """
    global _LOGGER_CONFIGURED
    if not _LOGGER_CONFIGURED:
        # 确保日志目录存在
        PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(PATH_LOG_FILE, encoding=CONST_ENCODING)
        console_handler = logging.StreamHandler()
        logging.basicConfig(
            level=logging.INFO,
            format=CONST_LOG_FORMAT,
            datefmt=CONST_LOG_DATEFMT,
            handlers=[file_handler, console_handler],
        )
        _LOGGER_CONFIGURED = True
    return logging.getLogger(name)


# =============================
# 文件操作
# =============================
class FileHandler:
    """文件与路径相关的通用处理器。"""

    @staticmethod
    def ensure_project_dirs() -> None:
        """确保项目运行所需目录存在：logs/output/temp。

        若目录不存在则自动创建。
        """
        for d in (PATH_LOGS_DIR, PATH_OUTPUT_DIR, PATH_TEMP_DIR):
            d.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_readable_file(path: Path) -> None:
        """校验文件可读。

        参数：
            path: 文件路径。
        异常：
            FileNotFoundError: 文件不存在或不可读。
        """
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"[{ERR_FILE_NOT_FOUND}] 文件不存在或不可读: {path}")

    @staticmethod
    def ensure_parent_writable(target: Path) -> None:
        """确保目标文件的父目录可写，不存在则创建。

        参数：
            target: 目标文件路径。
        异常：
            PermissionError: 目录不可写。
        """
        parent = target.parent
        parent.mkdir(parents=True, exist_ok=True)
        # Windows 上 os.access 可能不可靠，尝试创建临时文件验证
        probe = parent / f".__writable_probe_{int(time.time()*1000)}"
        try:
            with open(probe, "w", encoding=CONST_ENCODING) as f:  # noqa: P103
                f.write("probe")
        except Exception as exc:  # noqa: BLE001
            raise PermissionError(f"[{ERR_PATH_NOT_WRITABLE}] 目录不可写: {parent}") from exc
        else:
            probe.unlink(missing_ok=True)

    @staticmethod
    def signed_output_path(
        display_name: str,
        output_dir: Optional[Path] = None,
        page_number: Optional[int] = None,
    ) -> Path:
        """生成签名后的输出路径。

        参数：
            display_name: 文档显示名（原文件名去扩展名）。
            output_dir: 输出目录；None 则使用默认 PATH_OUTPUT_DIR。
            page_number: 单页导出时的页码（1 基）；None 表示整份文档。

        返回：
            输出路径，例如 output/contract_signed.pdf 或 output/contract Page 2_signed.pdf

        示例：
            >>> FileHandler.signed_output_path("contract", page_number=2).name
            'contract Page 2_signed.pdf'
        """
        target_dir = output_dir if output_dir is not None else PATH_OUTPUT_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        name = display_name if page_number is None else page_display_name(display_name, page_number)
        return target_dir / signed_filename(name)


# =============================
# 重试机制
# =============================
def retry_on_exception(
    retries: int = CONST_MAX_RETRY,
    exceptions: Iterable[Type[BaseException]] = (Exception,),
    delay_s: float = 0.2,
    backoff: float = 2.0,
) -> Callable[[Callable[..., object]], Callable[..., object]]:
    """装饰器：异常自动重试，含指数退避。

    参数：
        retries: 重试次数（不含首次）。
        exceptions: 触发重试的异常类型集合。
        delay_s: 初始等待秒数。
        backoff: 每次重试的等待倍数。

    返回：
        包装后的可调用对象。
    """
    caught = tuple(exceptions)

    def decorator(func: Callable[..., object]) -> Callable[..., object]:
        def wrapper(*args, **kwargs):
            wait = delay_s
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except caught as exc:
                    if attempt >= retries:
                        raise
                    logger = get_logger(func.__module__)
                    logger.warning("操作失败，准备重试（第 %s 次）：%s", attempt + 1, exc)
                    time.sleep(wait)
                    wait *= backoff
                    attempt += 1

        wrapper.__name__ = getattr(func, "__name__", "wrapper")
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator


# =============================
# 导出声明
# =============================
__all__ = [
    # 日志工具
    "get_logger",
    # 文件操作
    "FileHandler",
    # 坐标处理
    "clamp_coords",
    "clamp_rect_position",
    "fit_size_within",
    # 重试与错误处理
    "retry_on_exception",
    "ErrorHandler",
    "SignerError",
    "DecodeError",
    "RenderSurfaceError",
    "SignatureLoadError",
    "CaptureError",
    "AssemblyError",
    # 临时资源
    "ResourceScope",
    # 页选择与命名
    "parse_page_selection",
    "page_display_name",
    "display_name_from_filename",
    "signed_filename",
]

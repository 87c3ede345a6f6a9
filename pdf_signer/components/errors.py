"""
文件路径：pdf_signer/components/errors.py

说明：错误分类与统一异常类型。

错误分类（按影响范围）：
- DecodeError：输入不是可渲染的 PDF，仅中止该文档的光栅化；
- RenderSurfaceError：某页无法获取绘制表面，整个文档的光栅化中止；
- SignatureLoadError：签名图片加载失败，调用方降级为“无签名框”；
- CaptureError：快照截取失败，中止当前导出；
- AssemblyError：PDF 组装或写入失败，中止当前导出，不产生部分文件。
"""

from __future__ import annotations

from typing import Optional

from ..variables import (
    ERR_CAPTURE_FAILED,
    ERR_INVALID_PDF,
    ERR_PDF_WRITE_FAILED,
    ERR_RENDER_SURFACE_FAILED,
    ERR_SIGNATURE_LOAD_FAILED,
)


class ErrorHandler:
    """错误处理相关工具。"""

    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        """生成统一错误信息字符串。"""
        return f"[{err_code}] {message}"


class SignerError(RuntimeError):
    """所有业务异常的基类，携带数字错误码。"""

    default_code: int = ERR_PDF_WRITE_FAILED

    def __init__(self, message: str, err_code: Optional[int] = None) -> None:
        self.err_code = int(err_code if err_code is not None else self.default_code)
        self.message = message
        super().__init__(ErrorHandler.format_error(self.err_code, message))


class DecodeError(SignerError):
    """PDF 解码失败（非法、加密或空文档）。"""

    default_code = ERR_INVALID_PDF


class RenderSurfaceError(SignerError):
    """页面绘制表面不可用。"""

    default_code = ERR_RENDER_SURFACE_FAILED


class SignatureLoadError(SignerError):
    """签名图片缺失或无法读取尺寸。"""

    default_code = ERR_SIGNATURE_LOAD_FAILED


class CaptureError(SignerError):
    """快照截取失败。"""

    default_code = ERR_CAPTURE_FAILED


class AssemblyError(SignerError):
    """输出 PDF 组装失败。"""

    default_code = ERR_PDF_WRITE_FAILED


__all__ = [
    "ErrorHandler",
    "SignerError",
    "DecodeError",
    "RenderSurfaceError",
    "SignatureLoadError",
    "CaptureError",
    "AssemblyError",
]

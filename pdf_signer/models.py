"""
文件路径：pdf_signer/models.py

模块职责：
- 定义流水线中流转的数据对象：签名资源、文档、页面、签名框、快照、导出结果。
- 除 Document 外均为不可变对象；签名框的“变化”通过返回新对象实现。

坐标约定：
- 签名框坐标位于“容器坐标系”（页面渲染区域，左上为原点，单位与显示像素一致）。
- 容器尺寸 = 页面原生尺寸（pt）× 设备像素比，与位图尺寸 / 过采样倍数相同。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class SignatureAsset:
    """签名图片。所有页面共享同一个实例，只读。

    属性：
        image_bytes: 原始图片字节（任意常见位图格式）。
        natural_width, natural_height: 图片自然尺寸（像素）。
        source: 来源描述（文件路径或 "default"）。
    """

    image_bytes: bytes = field(repr=False)
    natural_width: int
    natural_height: int
    source: str = ""

    @property
    def aspect_ratio(self) -> float:
        """宽 / 高。"""
        return float(self.natural_width) / float(self.natural_height)


@dataclass(frozen=True)
class Page:
    """光栅化后的单页。

    属性：
        document_name: 所属文档显示名（仅作反向引用）。
        page_number: 页码（1 基）。
        bitmap: PNG 编码的页面位图。
        bitmap_width, bitmap_height: 位图像素尺寸。
        native_width, native_height: 页面原生尺寸（pt，缩放 1 时的视口）。
        device_pixel_ratio: 渲染时使用的设备像素比。
        raster_scale: 实际渲染比例（设备像素比 × 过采样倍数）。
    """

    document_name: str
    page_number: int
    bitmap: bytes = field(repr=False)
    bitmap_width: int
    bitmap_height: int
    native_width: float
    native_height: float
    device_pixel_ratio: float = 1.0
    raster_scale: float = 2.0

    @property
    def container_size(self) -> Tuple[float, float]:
        """页面渲染区域尺寸（签名框的边界）。"""
        dpr = self.device_pixel_ratio if self.device_pixel_ratio > 0 else 1.0
        return self.native_width * dpr, self.native_height * dpr


@dataclass
class Document:
    """一次上传中的单个 PDF。

    pages 在光栅化完成后一次性写入，之后不再修改。
    """

    path: Path
    display_name: str
    content: bytes = field(repr=False, default=b"")
    pages: Tuple[Page, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, page_number: int) -> Page:
        """按 1 基页码取页，越界抛 IndexError。"""
        if page_number < 1 or page_number > len(self.pages):
            raise IndexError(f"页码越界：{page_number} / {len(self.pages)}")
        return self.pages[page_number - 1]


@dataclass(frozen=True)
class Overlay:
    """绑定到单页的签名框几何状态。

    属性：
        x, y: 左上角在容器内的偏移。
        width, height: 尺寸，宽高比锁定为 aspect_ratio。
        aspect_ratio: 签名图片的自然宽高比（宽 / 高）。
        bounds_width, bounds_height: 容器尺寸。
    """

    x: float
    y: float
    width: float
    height: float
    aspect_ratio: float
    bounds_width: float
    bounds_height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        """(x0, y0, x1, y1)。"""
        return self.x, self.y, self.right, self.bottom

    def is_within_bounds(self, tolerance: float = 1e-6) -> bool:
        return (
            self.x >= -tolerance
            and self.y >= -tolerance
            and self.right <= self.bounds_width + tolerance
            and self.bottom <= self.bounds_height + tolerance
        )


@dataclass(frozen=True)
class Snapshot:
    """单页最终视觉状态的扁平化位图（JPEG）。"""

    image_bytes: bytes = field(repr=False)
    width: int
    height: int
    document_name: str = ""
    page_number: int = 0


@dataclass(frozen=True)
class ExportResult:
    """一次导出的结果。"""

    path: Path
    page_count: int
    size_bytes: int
    document_name: str
    page_number: Optional[int] = None

    @property
    def filename(self) -> str:
        return self.path.name


__all__ = [
    "SignatureAsset",
    "Page",
    "Document",
    "Overlay",
    "Snapshot",
    "ExportResult",
]

"""
文件路径：pdf_signer/variables.py

模块职责：
- 统一管理全局跨模块变量，确保模块化、无冲突、可追溯，可复用。
- 变量命名规范：{分类前缀}_{描述性名称}（全大写+下划线）。
  - PATH_：路径相关
  - STYLE_：样式相关
  - STATUS_：状态标识
  - CONST_：通用常量
  - ERR_：错误码

使用说明：
- 业务模块严禁定义新的全局变量，必须从本模块导入所需常量。
- 目录路径均使用 pathlib.Path 对象表示，使用时如需字符串请显式 str() 转换。
- 本工具不读取配置文件，所有可调参数集中在此处。
"""

from pathlib import Path
from typing import Tuple


# =============================
# 路径（PATH_）
# =============================
# 项目根目录：定位到当前文件（variables.py）的上两级目录
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

# 各功能目录
PATH_ASSETS_DIR: Path = PATH_ROOT / "assets"
PATH_TEMP_DIR: Path = PATH_ROOT / "temp"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

# 关键文件路径
PATH_DEFAULT_SIGNATURE: Path = PATH_ASSETS_DIR / "signature.png"  # 默认签名图片（可选，不存在时需手动上传）
PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"  # 应用运行日志


# =============================
# 样式（STYLE_）
# =============================
# GUI 样式（颜色与布局尺寸）
STYLE_GUI_PRIMARY_COLOR: str = "#0A3D62"  # 深蓝主色
STYLE_GUI_ACCENT_BLUE: str = "#1E88E5"  # 单页下载按钮
STYLE_GUI_DANGER_RED: str = "#DC2626"  # 整份下载按钮
STYLE_GUI_SUCCESS_GREEN: str = "#16A34A"  # 上传 PDF 按钮
STYLE_GUI_MUTED_GRAY: str = "#9E9E9E"
STYLE_GUI_BG: str = "#FFFFFF"
STYLE_GUI_CARD_BG: str = "#F5F7FA"
STYLE_GUI_DIVIDER: str = "#E0E0E0"
STYLE_GUI_OVERLAY_OUTLINE: str = "#9CA3AF"  # 签名框虚线颜色
STYLE_GUI_HANDLE_FILL: str = "#1E88E5"  # 缩放手柄颜色

STYLE_GUI_FONT_FAMILY: str = "微软雅黑"  # Windows 中文默认
STYLE_GUI_FONT_SIZE_BODY: int = 12
STYLE_GUI_FONT_SIZE_TITLE: int = 16

STYLE_GUI_PREVIEW_WIDTH: int = 640  # 页面预览区宽度（像素），签名框坐标以此为容器
STYLE_GUI_HANDLE_SIZE: int = 10  # 缩放手柄边长（像素）
STYLE_GUI_WINDOW_MIN_WIDTH: int = 760
STYLE_GUI_WINDOW_MIN_HEIGHT: int = 700


# =============================
# 状态（STATUS_）
# =============================
STATUS_SUCCESS: str = "SUCCESS"  # 操作成功
STATUS_ERROR: str = "ERROR"  # 操作失败
STATUS_PENDING: str = "PENDING"  # 渲染中


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"  # 文件读写默认编码
CONST_MAX_RETRY: int = 2  # 通用重试次数，用于 IO 等可重试操作
CONST_PDF_SUFFIX: str = ".pdf"
CONST_SIGNED_SUFFIX: str = "_signed"  # 输出文件名后缀（追加在文档显示名之后）
CONST_PAGE_NAME_TEMPLATE: str = "{name} Page {number}"  # 单页导出的显示名模板（页码 1 基）
CONST_PAGE_SELECTION_ALL: str = "all"  # 选择全部页面

# 光栅化：渲染比例 = 设备像素比 × 过采样倍数
CONST_DEVICE_PIXEL_RATIO: float = 1.0  # 无显示器上下文时的设备像素比
CONST_RASTER_SCALE: float = 2.0  # 过采样倍数，2.0 保证整页宽度嵌入 PDF 时的清晰度
CONST_RASTER_IMAGE_FORMAT: str = "PNG"  # 页面位图编码（无损）

# 签名框
CONST_OVERLAY_INITIAL_WIDTH_RATIO: float = 0.8  # 初始宽度占容器宽度的比例
CONST_OVERLAY_MIN_WIDTH: float = 16.0  # 缩放时允许的最小宽度（容器像素）

# 快照
CONST_SNAPSHOT_SCALE: float = 2.0  # 截取比例，相对容器尺寸
CONST_SNAPSHOT_IMAGE_FORMAT: str = "JPEG"
CONST_SNAPSHOT_JPEG_QUALITY: int = 100  # 最高质量

# 输出 PDF：A4 纵向，单位 pt
CONST_OUTPUT_PAGE_SIZE: Tuple[float, float] = (595.2755905511812, 841.8897637795277)

# 批量并发
CONST_MAX_WORKERS: int = 4  # 文档级并行渲染的线程数上限
CONST_UI_POLL_INTERVAL_MS: int = 100  # GUI 轮询批次状态的间隔

# 启动时是否输出运行环境能力（PyMuPDF 版本）
CONST_LOG_PYMUPDF_CAPABILITIES_ON_STARTUP: bool = True

# 日志格式（供 logging.basicConfig 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件/路径相关
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件不存在
ERR_INVALID_PDF: int = 1002  # 非法或损坏的 PDF 文件
ERR_PATH_NOT_WRITABLE: int = 1003  # 目标路径不可写

# 2xxx：渲染/签名相关
ERR_RENDER_SURFACE_FAILED: int = 2101  # 无法获取页面绘制表面
ERR_SIGNATURE_LOAD_FAILED: int = 2201  # 签名图片加载失败
ERR_PAGE_INDEX_OUT_OF_RANGE: int = 2002  # 页面索引越界

# 3xxx：截取/输出相关
ERR_PDF_WRITE_FAILED: int = 3002  # PDF 组装或写入失败
ERR_CAPTURE_FAILED: int = 3101  # 快照截取失败


# =============================
# 导出声明
# =============================
__all__ = [
    # PATH_
    "PATH_ROOT",
    "PATH_ASSETS_DIR",
    "PATH_TEMP_DIR",
    "PATH_OUTPUT_DIR",
    "PATH_LOGS_DIR",
    "PATH_DEFAULT_SIGNATURE",
    "PATH_LOG_FILE",
    # STYLE_
    "STYLE_GUI_PRIMARY_COLOR",
    "STYLE_GUI_ACCENT_BLUE",
    "STYLE_GUI_DANGER_RED",
    "STYLE_GUI_SUCCESS_GREEN",
    "STYLE_GUI_MUTED_GRAY",
    "STYLE_GUI_BG",
    "STYLE_GUI_CARD_BG",
    "STYLE_GUI_DIVIDER",
    "STYLE_GUI_OVERLAY_OUTLINE",
    "STYLE_GUI_HANDLE_FILL",
    "STYLE_GUI_FONT_FAMILY",
    "STYLE_GUI_FONT_SIZE_BODY",
    "STYLE_GUI_FONT_SIZE_TITLE",
    "STYLE_GUI_PREVIEW_WIDTH",
    "STYLE_GUI_HANDLE_SIZE",
    "STYLE_GUI_WINDOW_MIN_WIDTH",
    "STYLE_GUI_WINDOW_MIN_HEIGHT",
    # STATUS_
    "STATUS_SUCCESS",
    "STATUS_ERROR",
    "STATUS_PENDING",
    # CONST_
    "CONST_ENCODING",
    "CONST_MAX_RETRY",
    "CONST_PDF_SUFFIX",
    "CONST_SIGNED_SUFFIX",
    "CONST_PAGE_NAME_TEMPLATE",
    "CONST_PAGE_SELECTION_ALL",
    "CONST_DEVICE_PIXEL_RATIO",
    "CONST_RASTER_SCALE",
    "CONST_RASTER_IMAGE_FORMAT",
    "CONST_OVERLAY_INITIAL_WIDTH_RATIO",
    "CONST_OVERLAY_MIN_WIDTH",
    "CONST_SNAPSHOT_SCALE",
    "CONST_SNAPSHOT_IMAGE_FORMAT",
    "CONST_SNAPSHOT_JPEG_QUALITY",
    "CONST_OUTPUT_PAGE_SIZE",
    "CONST_MAX_WORKERS",
    "CONST_UI_POLL_INTERVAL_MS",
    "CONST_LOG_PYMUPDF_CAPABILITIES_ON_STARTUP",
    "CONST_LOG_FORMAT",
    "CONST_LOG_DATEFMT",
    # ERR_
    "ERR_FILE_NOT_FOUND",
    "ERR_INVALID_PDF",
    "ERR_PATH_NOT_WRITABLE",
    "ERR_RENDER_SURFACE_FAILED",
    "ERR_SIGNATURE_LOAD_FAILED",
    "ERR_PAGE_INDEX_OUT_OF_RANGE",
    "ERR_PDF_WRITE_FAILED",
    "ERR_CAPTURE_FAILED",
]

"""
Application default settings and constants
"""
from pathlib import Path
import sys

# =============================================================================
# Application Information
# =============================================================================
APP_NAME = "Slide TOC Builder"
APP_VERSION = "1.0.0"

# =============================================================================
# Layout Settings (points, 1 pt = 1/72 inch)
# =============================================================================
TITLE_HEIGHT = 120.0       # Band reserved for the slide title
CAPTION_HEIGHT = 20.0      # Caption row under each thumbnail
BOTTOM_MARGIN = 40.0       # Empty band at the bottom of the slide
MIN_THUMB_WIDTH = 80.0
MIN_THUMB_HEIGHT = 60.0

DEFAULT_SLIDE_WIDTH = 960.0   # 13.333 in x 72 (16:9)
DEFAULT_SLIDE_HEIGHT = 540.0  # 7.5 in x 72

MAX_COLUMNS = 8            # Upper bound of the column search
FALLBACK_MAX_COLUMNS = 4   # Column cap of the last-resort layout
CANVAS_PADDING = 20.0      # Padding around the preview surface

DEFAULT_COLUMNS = 3
DEFAULT_MARGIN = 20

# =============================================================================
# Rendering Settings
# =============================================================================
EXPORT_WIDTH = 1600        # Raster size of thumbnails embedded in the TOC slide
EXPORT_HEIGHT = 900
PREVIEW_WIDTH = 320        # Preview thumbnails are exported at twice this width
PLACEHOLDER_COLOR = "#D3D3D3"
PLACEHOLDER_TEXT_COLOR = "#000000"
PLACEHOLDER_FONT_SIZE = 20
SOFFICE_TIMEOUT_SEC = 180

# =============================================================================
# TOC Slide Shapes
# =============================================================================
PICTURE_ID_BASE = 2000
FRAME_ID_BASE = 3000
CAPTION_ID_BASE = 4000
FRAME_LINE_COLOR = "808080"
CAPTION_SHAPE_HEIGHT_EMU = 300000  # Not tied to CAPTION_HEIGHT
CAPTION_LABEL = "Slide {number}"
OUTPUT_SUFFIX = "_TOC"

# =============================================================================
# Default External Tool Paths
# =============================================================================
if sys.platform == 'win32':
    DEFAULT_SOFFICE_PATHS = [
        Path(r"C:\Program Files\LibreOffice\program\soffice.exe"),
        Path(r"C:\Program Files (x86)\LibreOffice\program\soffice.exe"),
    ]
    # Note: Poppler for Windows may have bin or Library\bin depending on distribution
    DEFAULT_POPPLER_PATHS = [
        Path(r"C:\Program Files\poppler-24.02.0\Library\bin"),
        Path(r"C:\Program Files\poppler-24.02.0\bin"),
        Path(r"C:\Program Files\poppler\Library\bin"),
        Path(r"C:\Program Files\poppler\bin"),
        Path(r"C:\poppler\Library\bin"),
        Path(r"C:\poppler\bin"),
    ]
elif sys.platform == 'darwin':
    DEFAULT_SOFFICE_PATHS = [
        Path("/Applications/LibreOffice.app/Contents/MacOS/soffice"),
    ]
    DEFAULT_POPPLER_PATHS = []
else:
    # Linux: assume they exist in system paths
    DEFAULT_SOFFICE_PATHS = []
    DEFAULT_POPPLER_PATHS = []

# =============================================================================
# UI Theme Colors
# =============================================================================
THEME_PRIMARY = "#1976D2"      # Deep Blue
THEME_BACKGROUND = "#FAFAFA"   # Light Grey

PREVIEW_MIN_SCALE = 0.3
PREVIEW_MAX_SCALE = 1.2

# =============================================================================
# Settings File
# =============================================================================
SETTINGS_FILENAME = "settings.json"

import os
from dotenv import load_dotenv

# --- Project paths ---
PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Expect .env one level ABOVE geometry_canvas (e.g., the repository root)
ENV_PATH = os.path.join(os.path.dirname(PACKAGE_DIR), ".env")
load_dotenv(dotenv_path=ENV_PATH)


# --- small helpers for env parsing ---
def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except Exception:
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except Exception:
        return default


# --- Canvas ---
# Host-supplied sizing defaults; padding is the mapper's range inset.
CANVAS_WIDTH = _env_int("CANVAS_WIDTH", 800)      # px
CANVAS_HEIGHT = _env_int("CANVAS_HEIGHT", 600)    # px
CANVAS_PADDING = _env_int("CANVAS_PADDING", 80)   # px

# --- Bounds / domain ---
DOMAIN_PAD_FRAC = _env_float("DOMAIN_PAD_FRAC", 0.2)
DEFAULT_EXTENT = _env_float("DEFAULT_EXTENT", 10.0)   # empty scene -> [-10, 10]
MIN_SPAN = _env_float("MIN_SPAN", 1.0)
MIN_GRID_SPAN = _env_float("MIN_GRID_SPAN", 10.0)

# --- Curves ---
CURVE_DEFAULT_POINTS = _env_int("CURVE_DEFAULT_POINTS", 100)

# --- Annotation geometry (all px) ---
ANGLE_ARC_RADIUS_PX = _env_float("ANGLE_ARC_RADIUS_PX", 20.0)
ANGLE_LABEL_OFFSET_PX = _env_float("ANGLE_LABEL_OFFSET_PX", 10.0)
RIGHT_ANGLE_EPSILON = _env_float("RIGHT_ANGLE_EPSILON", 0.01)   # degrees
RIGHT_ANGLE_SIZE_PX = _env_float("RIGHT_ANGLE_SIZE_PX", 12.0)
LENGTH_LABEL_OFFSET_PX = _env_float("LENGTH_LABEL_OFFSET_PX", 12.0)
BOW_FRACTION = _env_float("BOW_FRACTION", 0.15)
POINT_RADIUS_PX = _env_float("POINT_RADIUS_PX", 5.0)
POINT_HIT_RADIUS_PX = _env_float("POINT_HIT_RADIUS_PX", 8.0)

# --- Interaction ---
ZOOM_MIN = _env_float("ZOOM_MIN", 0.5)
ZOOM_MAX = _env_float("ZOOM_MAX", 3.0)
ZOOM_WHEEL_STEP = _env_float("ZOOM_WHEEL_STEP", 0.1)
ZOOM_BUTTON_STEP = _env_float("ZOOM_BUTTON_STEP", 0.2)
ROTATION_STEP = _env_float("ROTATION_STEP", 15.0)   # degrees

# --- Output ---
RENDER_DPI = _env_int("RENDER_DPI", 100)
WRITE_SVG = _env_bool("WRITE_SVG", False)

# --- Logging Configuration ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # options: DEBUG, INFO, WARNING, ERROR


if __name__ == "__main__":
    # Quick sanity check
    print(f"Package Directory: {PACKAGE_DIR}")
    print(f"Looking for .env at: {ENV_PATH}")
    print(f"Canvas: {CANVAS_WIDTH}x{CANVAS_HEIGHT} (padding {CANVAS_PADDING})")
    print(f"Zoom clamp: [{ZOOM_MIN}, {ZOOM_MAX}]")
    print(f"Right-angle epsilon: {RIGHT_ANGLE_EPSILON}")
    print(f"Log level: {LOG_LEVEL}")

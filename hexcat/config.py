import os
from typing import Optional

os.environ.setdefault('ESCDELAY', '25')  # reduce escape key delay (ms)


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.environ.get(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


BUFFER_SIZE = _env_int("HEXCAT_BUFFER_SIZE", 4096)        # bytes per socket read
TICK_S = _env_int("HEXCAT_TICK_MS", 10) / 1000            # event loop sleep slice
CONNECT_TIMEOUT_S = _env_float("HEXCAT_CONNECT_TIMEOUT", 10.0)

LOG_FILE: Optional[str] = os.environ.get("HEXCAT_LOG_FILE") or None
LOG_LEVEL = os.environ.get("HEXCAT_LOG_LEVEL", "INFO").upper()

# layout
TITLE_HEIGHT = 2
INPUT_HEIGHT = 2
GUTTER_WIDTH = 8

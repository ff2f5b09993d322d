"""
Layout and compositing.

    row 0        title banner
    row 1        ────────┬───────
    row 2..h-4   log rows
    row h-3      ────────┼───────   (log divider, repainted by the input section)
    row h-2      prompt + input
    row h-1      unused

Each section paints into its own grid; compose() places the grids at their
origins and compose_and_paint() is the only place that writes to the screen.
"""
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple

from .config import INPUT_HEIGHT, TITLE_HEIGHT
from .errors import PaintError
from .sections import PaintOutput, Sections


class SectionKind(Enum):
    TITLE = "title"
    LOG = "log"
    INPUT = "input"


class Area(NamedTuple):
    """Where a section lands on screen: origin plus the size it is asked to paint."""
    x: int
    y: int
    w: int
    h: int


PAINTERS = {
    SectionKind.TITLE: lambda s, w, h: s.title.paint(w, h),
    SectionKind.LOG: lambda s, w, h: s.log.paint(w, h),
    SectionKind.INPUT: lambda s, w, h: s.input.paint(w, h),
}


def layout(width: int, height: int) -> Dict[SectionKind, Area]:
    # the input sits one row above the bottom and covers the log's last row
    return {
        SectionKind.TITLE: Area(0, 0, width, TITLE_HEIGHT),
        SectionKind.LOG: Area(0, TITLE_HEIGHT, width, max(0, height - TITLE_HEIGHT - INPUT_HEIGHT)),
        SectionKind.INPUT: Area(0, height - INPUT_HEIGHT - 1, width, INPUT_HEIGHT),
    }


def paint_section(kind: SectionKind, sections: Sections, r: Area) -> PaintOutput:
    rows = PAINTERS[kind](sections, r.w, r.h)
    if len(rows) != r.h or any(len(row) != r.w for row in rows):
        raise PaintError(f"{kind.value} section painted the wrong shape for {r!r}.")
    return rows


def compose(sections: Sections, size: Tuple[int, int]) -> List[Tuple[int, int, str]]:
    """(x, y, text) writes for one frame, in paint order, clipped to the screen."""
    width, height = size
    writes = []
    for kind, r in layout(width, height).items():
        for i, row in enumerate(paint_section(kind, sections, r)):
            y = r.y + i
            if 0 <= y < height:
                writes.append((r.x, y, row))
    return writes


def cursor_position(sections: Sections, size: Tuple[int, int]) -> Tuple[int, int]:
    width, height = size
    r = layout(width, height)[SectionKind.INPUT]
    return sections.input.cursor_column(width), max(0, r.y + 1)


def compose_and_paint(sections: Sections, terminal, size: Optional[Tuple[int, int]] = None) -> Tuple[int, int]:
    """Paint every section and park the cursor in the input box. Returns the size used."""
    size = size or terminal.size()
    writes = compose(sections, size)
    terminal.hide_cursor()
    for x, y, row in writes:
        terminal.move_cursor(x, y)
        terminal.write(row)
    terminal.move_cursor(*cursor_position(sections, size))
    terminal.show_cursor()
    terminal.flush()
    return size

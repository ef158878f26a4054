"""In-place terminal redraw of fixed- or variable-height frames.

A frame is written once with plain newlines.  Each later frame moves the
cursor back up over the previous one and rewrites every line, clearing any
lines left over when the new frame is shorter.  Only three control codes
are used: cursor up, erase line and carriage return.

:func:`render` is pure; :class:`FrameWriter` does the I/O.
"""

from __future__ import annotations

import sys
from typing import IO

from rich.control import Control, ControlType

from routerctl.router_common import Frame

_CARRIAGE_RETURN = str(Control(ControlType.CARRIAGE_RETURN))
# Mode 2 erases the whole line regardless of cursor column.
_ERASE_LINE = str(Control((ControlType.ERASE_IN_LINE, 2)))


def _cursor_up(count: int) -> str:
    if count <= 0:
        return ""
    return str(Control((ControlType.CURSOR_UP, count)))


def render(previous: Frame | None, frame: Frame) -> str:
    """Return the text that replaces *previous* on screen with *frame*.

    The cursor is assumed to sit at the start of the line just below
    *previous* and is left just below the last line of *frame*.
    """
    if previous is None:
        return "".join(f"{line}\n" for line in frame)

    parts = [_cursor_up(len(previous))]
    for line in frame:
        parts.append(f"{_CARRIAGE_RETURN}{_ERASE_LINE}{line}\n")

    stale = max(0, len(previous) - len(frame))
    if stale:
        parts.append(f"{_CARRIAGE_RETURN}{_ERASE_LINE}\n" * stale)
        parts.append(_cursor_up(stale))
    return "".join(parts)


class FrameWriter:
    """Writes rendered frames to a stream and flushes after each one."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write(self, previous: Frame | None, frame: Frame) -> Frame:
        """Draw *frame* over *previous*; return *frame* for the caller to keep."""
        text = render(previous, frame)
        if text:
            self.stream.write(text)
        self.stream.flush()
        return frame

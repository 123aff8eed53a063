"""Argument checks and offset arithmetic used by every component."""

from typing import List, Tuple


def require_text(name: str, value) -> str:
    """Fail fast when a text argument is not a string."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, not {type(value).__name__}")
    return value


def require_offset(name: str, value) -> int:
    """Fail fast when an offset argument is not an integer."""
    # bool is an int subclass but never a meaningful offset
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, not {type(value).__name__}")
    return value


def clamp(offset: int, length: int) -> int:
    """Clamp offset into [0, length]."""
    return max(0, min(offset, length))


def clamp_range(start: int, end: int, length: int) -> Tuple[int, int]:
    """Clamp both ends of a range and put them in order."""
    start = clamp(start, length)
    end = clamp(end, length)
    return min(start, end), max(start, end)


def locate_line(lines: List[str], offset: int) -> Tuple[int, int]:
    """
    Find the line containing offset by accumulating line lengths.

    Each line contributes its length plus one for the newline. The first
    line whose end reaches offset wins, so an offset sitting on a newline
    belongs to the line before it.

    Args:
        lines: Text split on "\\n" (never empty)
        offset: Offset into the joined text

    Returns:
        Tuple of (line_index, offset_of_line_start)
    """
    line_start = 0
    for index, line in enumerate(lines):
        if line_start + len(line) >= offset:
            return index, line_start
        line_start += len(line) + 1

    # Past the end: attach to the last line
    last = len(lines) - 1
    return last, line_start - len(lines[last]) - 1

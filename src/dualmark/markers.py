"""Marker tables and line patterns shared by the editor and the style tracker."""

import re
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class StyleKind(Enum):
    """Inline styles that can be toggled on the Markdown source."""
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    UNDERLINE = "underline"
    HIGHLIGHT = "highlight"

    @classmethod
    def coerce(cls, value: Union["StyleKind", str]) -> Optional["StyleKind"]:
        """Return the member for value, or None if it names no style."""
        return _coerce(cls, value)


class ListKind(Enum):
    """Line-prefix list markers."""
    UNORDERED = "unordered"
    TASK = "task"

    @classmethod
    def coerce(cls, value: Union["ListKind", str]) -> Optional["ListKind"]:
        """Return the member for value, or None if it names no list kind."""
        return _coerce(cls, value)


class DeleteKind(Enum):
    """Directions understood by delete_character."""
    BACKWARD = "backward"
    FORWARD = "forward"
    WORD_BACKWARD = "word_backward"
    WORD_FORWARD = "word_forward"

    @classmethod
    def coerce(cls, value: Union["DeleteKind", str]) -> Optional["DeleteKind"]:
        """Return the member for value, or None if it names no delete kind."""
        if isinstance(value, str):
            value = _DELETE_ALIASES.get(value, value)
        return _coerce(cls, value)


_DELETE_ALIASES = {
    "wordBackward": "word_backward",
    "wordForward": "word_forward",
}


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            return None
    return None


# (prefix, suffix) per style. Underline and highlight are HTML tags.
STYLE_MARKERS: Dict[StyleKind, Tuple[str, str]] = {
    StyleKind.BOLD: ("**", "**"),
    StyleKind.ITALIC: ("*", "*"),
    StyleKind.STRIKETHROUGH: ("~~", "~~"),
    StyleKind.CODE: ("`", "`"),
    StyleKind.UNDERLINE: ("<u>", "</u>"),
    StyleKind.HIGHLIGHT: ("<mark>", "</mark>"),
}

TAG_STYLES = frozenset({StyleKind.UNDERLINE, StyleKind.HIGHLIGHT})

# An asterisk that belongs to a "**" match is not an italic marker.
MARKER_EXCLUSIONS: Dict[StyleKind, Tuple[str, ...]] = {
    StyleKind.ITALIC: ("**",),
}

LIST_MARKERS: Dict[ListKind, str] = {
    ListKind.UNORDERED: "- ",
    ListKind.TASK: "- [ ] ",
}

BLOCKQUOTE_MARKER = "> "

HEADING_RE = re.compile(r"^(#{1,6})\s+")
LIST_ITEM_RE = re.compile(r"^\s*-\s")
LIST_MARKER_STRIP_RE = re.compile(r"^\s*-\s+(?:\[[ xX]\]\s*)?")
TASK_ITEM_RE = re.compile(r"^\s*-\s+\[[ xX]\]")
BLOCKQUOTE_RE = re.compile(r"^\s*>")
BLOCKQUOTE_STRIP_RE = re.compile(r"^\s*>\s*")
CONTINUATION_RE = re.compile(r"^(\s*)(- \[[ xX]\] |- |> )")

WORD_CHAR_RE = re.compile(r"[A-Za-z0-9_]")

# Any of these in the source means block structure that breaks
# proportional offset interpolation.
STRUCTURE_PATTERNS = (
    re.compile(r"^\s*(```|~~~)", re.MULTILINE),
    re.compile(r"^\s*\|.*\|\s*$", re.MULTILINE),
    re.compile(r"^\s*\$\$", re.MULTILINE),
    re.compile(r"!\[[^\]]*\]\([^)]*\)"),
    re.compile(r"\[[^\]]*\]\([^)]*\)"),
    re.compile(r"^#{1,6}\s", re.MULTILINE),
    re.compile(r"^\s*[-*+]\s", re.MULTILINE),
    re.compile(r"^\s*\d+[.)]\s", re.MULTILINE),
    re.compile(r"^\s*>", re.MULTILINE),
)


def is_word_char(char: str) -> bool:
    return bool(WORD_CHAR_RE.fullmatch(char))


def find_occurrences(text: str, marker: str) -> List[int]:
    """Return the start of every non-overlapping occurrence of marker."""
    positions = []
    index = text.find(marker)
    while index != -1:
        positions.append(index)
        index = text.find(marker, index + len(marker))
    return positions


def find_marker_positions(text: str, marker: str, exclude: Tuple[str, ...] = ()) -> List[int]:
    """
    Find occurrences of marker that are not part of a longer marker.

    Each string in exclude is matched first; any occurrence of marker that
    overlaps one of those matches is dropped.

    Args:
        text: Text to scan
        marker: Marker to look for (e.g. "*")
        exclude: Longer markers sharing characters with marker (e.g. "**")

    Returns:
        Sorted start positions of the remaining occurrences
    """
    covered = set()
    for longer in exclude:
        for start in find_occurrences(text, longer):
            covered.update(range(start, start + len(longer)))

    return [
        start for start in find_occurrences(text, marker)
        if not covered.intersection(range(start, start + len(marker)))
    ]


def pair_positions(positions: List[int]) -> List[Tuple[int, int]]:
    """Pair occurrences positionally: 1st with 2nd, 3rd with 4th, ..."""
    return list(zip(positions[0::2], positions[1::2]))


def run_length_before(text: str, index: int, char: str) -> int:
    """Count consecutive copies of char ending just before index."""
    count = 0
    while index - count - 1 >= 0 and text[index - count - 1] == char:
        count += 1
    return count


def run_length_after(text: str, index: int, char: str) -> int:
    """Count consecutive copies of char starting at index."""
    count = 0
    while index + count < len(text) and text[index + count] == char:
        count += 1
    return count

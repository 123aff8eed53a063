"""Detection of the styles and block constructs active at a source offset."""

import logging
from typing import Dict, Optional, Tuple, Union

from .config import Config
from .markers import (
    BLOCKQUOTE_RE,
    HEADING_RE,
    LIST_ITEM_RE,
    MARKER_EXCLUSIONS,
    STYLE_MARKERS,
    TAG_STYLES,
    TASK_ITEM_RE,
    ListKind,
    StyleKind,
    find_marker_positions,
    find_occurrences,
    pair_positions,
)
from .models import BlockState, StyleSnapshot, StyleSpan
from .offsets import clamp, locate_line, require_offset, require_text

logger = logging.getLogger(__name__)


class StyleStateTracker:
    """
    Reports which inline styles and block constructs surround an offset.

    Style detection only looks at a window of style_window_radius
    characters on each side of the offset, so a style whose markers sit
    further away than that is not reported.

    Tag styles (underline, highlight) pair the n-th opening tag with the
    n-th closing tag. Interleaved or mismatched tags are not supported.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the StyleStateTracker.

        Args:
            config: Supplies the window radius. Defaults to Config.default().
        """
        self.config = config or Config.default()

    def active_styles(self, content: str, offset: int) -> Dict[StyleKind, bool]:
        """
        Detect which inline styles are active at offset.

        Args:
            content: Markdown source
            offset: Source offset (clamped)

        Returns:
            Mapping of every StyleKind to whether it is active
        """
        window, relative = self._window(content, offset)

        styles = {}
        for style in StyleKind:
            if style in TAG_STYLES:
                styles[style] = self._inside_tags(window, relative, style)
            else:
                styles[style] = self._inside_markers(window, relative, style)
        return styles

    def active_heading_level(self, content: str, offset: int) -> int:
        """Return the ATX heading level (1-6) of the offset's line, or 0."""
        line = self._line_at(content, offset)
        match = HEADING_RE.match(line)
        return len(match.group(1)) if match else 0

    def active_block(self, content: str, offset: int) -> BlockState:
        """Report heading level, list kind and blockquote state of the offset's line."""
        line = self._line_at(content, offset)

        heading = HEADING_RE.match(line)
        list_kind = None
        if TASK_ITEM_RE.match(line):
            list_kind = ListKind.TASK
        elif LIST_ITEM_RE.match(line):
            list_kind = ListKind.UNORDERED

        return BlockState(
            heading_level=len(heading.group(1)) if heading else 0,
            list_kind=list_kind,
            blockquote=bool(BLOCKQUOTE_RE.match(line))
        )

    def style_span(self, content: str, offset: int, kind: Union[StyleKind, str]) -> StyleSpan:
        """
        Find the source span of the nearest style instance around offset.

        Uses the last prefix at or before offset and the first suffix at or
        after it. This local pairing ignores other pairs in the document and
        can disagree with active_styles on unbalanced input.

        Returns:
            StyleSpan covering prefix through suffix, or an empty span at
            offset when either marker is missing or kind is unknown
        """
        require_text("content", content)
        require_offset("offset", offset)
        offset = clamp(offset, len(content))

        style = StyleKind.coerce(kind)
        if style is None:
            logger.debug(f"Ignoring unknown style {kind!r}")
            return StyleSpan(offset, offset)

        prefix, suffix = STYLE_MARKERS[style]
        prefix_index = content.rfind(prefix, 0, offset)
        suffix_index = content.find(suffix, offset)

        if prefix_index != -1 and suffix_index != -1:
            return StyleSpan(prefix_index, suffix_index + len(suffix))
        return StyleSpan(offset, offset)

    def snapshot(self, content: str, offset: int, memo: Optional["StyleMemo"] = None) -> StyleSnapshot:
        """
        Compute styles and heading level for offset.

        Args:
            content: Markdown source
            offset: Source offset
            memo: Optional caller-owned cache for this document

        Returns:
            StyleSnapshot for offset
        """
        if memo is not None:
            cached = memo.get(content, offset)
            if cached is not None:
                return cached

        result = StyleSnapshot(
            styles=self.active_styles(content, offset),
            heading_level=self.active_heading_level(content, offset)
        )

        if memo is not None:
            memo.put(content, offset, result)
        return result

    def _window(self, content: str, offset: int) -> Tuple[str, int]:
        require_text("content", content)
        require_offset("offset", offset)
        offset = clamp(offset, len(content))

        radius = self.config.style_window_radius
        start = max(0, offset - radius)
        end = min(len(content), offset + radius)
        return content[start:end], offset - start

    @staticmethod
    def _line_at(content: str, offset: int) -> str:
        require_text("content", content)
        require_offset("offset", offset)
        lines = content.split("\n")
        index, _ = locate_line(lines, clamp(offset, len(content)))
        return lines[index]

    @staticmethod
    def _inside_markers(window: str, relative: int, style: StyleKind) -> bool:
        marker, _ = STYLE_MARKERS[style]
        positions = find_marker_positions(window, marker, MARKER_EXCLUSIONS.get(style, ()))
        return any(
            open_pos < relative < close_pos + len(marker)
            for open_pos, close_pos in pair_positions(positions)
        )

    @staticmethod
    def _inside_tags(window: str, relative: int, style: StyleKind) -> bool:
        open_tag, close_tag = STYLE_MARKERS[style]
        opens = find_occurrences(window, open_tag)
        closes = find_occurrences(window, close_tag)
        return any(
            open_pos + len(open_tag) <= relative <= close_pos
            for open_pos, close_pos in zip(opens, closes)
        )


class StyleMemo:
    """
    Caller-owned cache of style snapshots for one document version.

    Entries are keyed by (content, offset). Seeing a different content
    drops every entry, so a snapshot never outlives the text it was
    computed from.
    """

    def __init__(self):
        self._content: Optional[str] = None
        self._entries: Dict[int, StyleSnapshot] = {}
        self.last: Optional[StyleSnapshot] = None

    def get(self, content: str, offset: int) -> Optional[StyleSnapshot]:
        """Return a copy of the cached snapshot, or None."""
        if content is not self._content and content != self._content:
            self.invalidate()
            return None
        cached = self._entries.get(offset)
        if cached is None:
            return None
        self.last = cached
        return cached.copy()

    def put(self, content: str, offset: int, result: StyleSnapshot) -> None:
        if content is not self._content and content != self._content:
            self.invalidate()
            self._content = content
        self._entries[offset] = result.copy()
        self.last = result

    def invalidate(self) -> None:
        """Forget every entry (call after any text mutation)."""
        self._content = None
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_default_tracker = StyleStateTracker()


def active_styles(content: str, offset: int) -> Dict[StyleKind, bool]:
    return _default_tracker.active_styles(content, offset)


def active_heading_level(content: str, offset: int) -> int:
    return _default_tracker.active_heading_level(content, offset)


def active_block(content: str, offset: int) -> BlockState:
    return _default_tracker.active_block(content, offset)


def style_span(content: str, offset: int, kind) -> StyleSpan:
    return _default_tracker.style_span(content, offset, kind)

"""Offset translation between the rendered view's text and the Markdown source."""

import logging

from .markers import STRUCTURE_PATTERNS
from .offsets import clamp, locate_line, require_offset, require_text

logger = logging.getLogger(__name__)


class PositionMapper:
    """
    Maps caret offsets between view text and Markdown source.

    Strategy:
    - Simple source (no block structure): proportional interpolation
    - Anything else: line-based mapping, proportional within the matched line

    The mapping is a heuristic. Results are always inside the target text
    but only approximate the logical position.
    """

    def is_simple(self, source_text: str) -> bool:
        """Check whether the Markdown source has no block structure."""
        require_text("source_text", source_text)
        return not any(pattern.search(source_text) for pattern in STRUCTURE_PATTERNS)

    def to_source_offset(self, view_text: str, source_text: str, view_offset: int) -> int:
        """
        Convert an offset in the view text to an offset in the Markdown source.

        Args:
            view_text: Flattened text shown by the rendered view
            source_text: Markdown source
            view_offset: Offset into view_text (clamped if out of range)

        Returns:
            Offset into source_text in [0, len(source_text)]
        """
        require_text("view_text", view_text)
        require_offset("view_offset", view_offset)
        return self._map(view_text, source_text, view_offset, simple=self.is_simple(source_text))

    def to_view_offset(self, source_text: str, view_text: str, source_offset: int) -> int:
        """
        Convert an offset in the Markdown source to an offset in the view text.

        Args:
            source_text: Markdown source
            view_text: Flattened text shown by the rendered view
            source_offset: Offset into source_text (clamped if out of range)

        Returns:
            Offset into view_text in [0, len(view_text)]
        """
        require_text("view_text", view_text)
        require_offset("source_offset", source_offset)
        return self._map(source_text, view_text, source_offset, simple=self.is_simple(source_text))

    def _map(self, origin: str, target: str, offset: int, simple: bool) -> int:
        offset = clamp(offset, len(origin))
        if simple:
            return self._proportional(offset, len(origin), len(target))
        return self._line_based(origin, target, offset)

    @staticmethod
    def _proportional(offset: int, origin_len: int, target_len: int) -> int:
        if origin_len == 0 or target_len == 0:
            return 0
        return clamp(offset * target_len // origin_len, target_len)

    def _line_based(self, origin: str, target: str, offset: int) -> int:
        origin_lines = origin.split("\n")
        target_lines = target.split("\n")

        line_index, line_start = locate_line(origin_lines, offset)
        if line_index >= len(target_lines):
            # Target ran out of lines: treat as end of document
            logger.debug(
                f"Line {line_index} has no counterpart ({len(target_lines)} target lines), "
                f"clamping to end"
            )
            return len(target)

        target_start = sum(len(line) + 1 for line in target_lines[:line_index])
        origin_line = origin_lines[line_index]
        target_line = target_lines[line_index]
        within = offset - line_start

        if not origin_line:
            within_target = min(within, len(target_line))
        else:
            within_target = self._proportional(within, len(origin_line), len(target_line))

        return clamp(target_start + within_target, len(target))


_default_mapper = PositionMapper()


def is_simple_content(source_text: str) -> bool:
    """Module-level shortcut for PositionMapper.is_simple."""
    return _default_mapper.is_simple(source_text)


def map_view_to_source(view_text: str, source_text: str, view_offset: int) -> int:
    """Translate a view offset into a Markdown source offset."""
    return _default_mapper.to_source_offset(view_text, source_text, view_offset)


def map_source_to_view(source_text: str, view_text: str, source_offset: int) -> int:
    """Translate a Markdown source offset into a view offset."""
    return _default_mapper.to_view_offset(source_text, view_text, source_offset)

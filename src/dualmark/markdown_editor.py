"""Edit operations applied directly to the Markdown source."""

import logging
from typing import List, Optional, Tuple, Union

from .config import Config
from .markers import (
    BLOCKQUOTE_MARKER,
    BLOCKQUOTE_RE,
    BLOCKQUOTE_STRIP_RE,
    CONTINUATION_RE,
    HEADING_RE,
    LIST_ITEM_RE,
    LIST_MARKER_STRIP_RE,
    LIST_MARKERS,
    MARKER_EXCLUSIONS,
    STYLE_MARKERS,
    TAG_STYLES,
    DeleteKind,
    ListKind,
    StyleKind,
    find_marker_positions,
    find_occurrences,
    is_word_char,
    pair_positions,
    run_length_after,
    run_length_before,
)
from .models import EditResult
from .offsets import clamp, clamp_range, locate_line, require_offset, require_text

logger = logging.getLogger(__name__)

MAX_HEADING_LEVEL = 6


class MarkdownEditor:
    """
    Performs one editing gesture on a Markdown source string.

    Every operation takes the current source plus offsets and returns an
    EditResult holding the new source and the new caret offset. Offsets are
    clamped into the document, and an unknown style/list/delete kind leaves
    the source untouched.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the MarkdownEditor.

        Args:
            config: Supplies placeholder texts. Defaults to Config.default().
        """
        self.config = config or Config.default()

    # --- Plain insertion and deletion ---

    def insert_text(self, content: str, position: int, text: str) -> EditResult:
        """Splice text at position; caret lands after it."""
        require_text("text", text)
        position = self._clamped(content, position)
        return self._insert(content, position, text, len(text))

    def delete_range(self, content: str, start: int, end: int) -> EditResult:
        """Remove [start, end); caret lands at start."""
        start, end = self._clamped_range(content, start, end)
        return EditResult(content[:start] + content[end:], start)

    def delete_character(
        self,
        content: str,
        position: int,
        kind: Union[DeleteKind, str] = DeleteKind.BACKWARD
    ) -> EditResult:
        """
        Delete a character or a word next to the caret.

        Word deletion first skips the non-word characters touching the caret,
        then the run of word characters ([A-Za-z0-9_]) up to the next
        non-word character.

        Args:
            content: Markdown source
            position: Caret offset
            kind: backward, forward, word_backward or word_forward

        Returns:
            EditResult; a no-op at the document bounds
        """
        position = self._clamped(content, position)
        delete_kind = DeleteKind.coerce(kind)
        if delete_kind is None:
            logger.debug(f"Ignoring unknown delete kind {kind!r}")
            return EditResult(content, position)

        if delete_kind is DeleteKind.BACKWARD:
            if position == 0:
                return EditResult(content, 0)
            return EditResult(content[:position - 1] + content[position:], position - 1)

        if delete_kind is DeleteKind.FORWARD:
            if position == len(content):
                return EditResult(content, position)
            return EditResult(content[:position] + content[position + 1:], position)

        if delete_kind is DeleteKind.WORD_BACKWARD:
            boundary = position
            while boundary > 0 and not is_word_char(content[boundary - 1]):
                boundary -= 1
            while boundary > 0 and is_word_char(content[boundary - 1]):
                boundary -= 1
            return EditResult(content[:boundary] + content[position:], boundary)

        boundary = position
        while boundary < len(content) and not is_word_char(content[boundary]):
            boundary += 1
        while boundary < len(content) and is_word_char(content[boundary]):
            boundary += 1
        return EditResult(content[:position] + content[boundary:], position)

    def insert_newline(self, content: str, position: int) -> EditResult:
        """
        Insert a newline, continuing a list item or blockquote.

        When the line up to the caret starts with "- ", "- [ ] " or "> "
        (optionally indented), the same marker is repeated on the new line.
        Checked task items continue as unchecked ones.
        """
        position = self._clamped(content, position)
        line_start = content.rfind("\n", 0, position) + 1
        head = content[line_start:position]

        continuation = ""
        match = CONTINUATION_RE.match(head)
        if match:
            indent, marker = match.groups()
            if marker.startswith("- ["):
                marker = LIST_MARKERS[ListKind.TASK]
            continuation = indent + marker

        text = "\n" + continuation
        return self._insert(content, position, text, len(text))

    # --- Inline styles ---

    def toggle_inline_style(
        self,
        content: str,
        start: int,
        end: int,
        kind: Union[StyleKind, str]
    ) -> EditResult:
        """
        Wrap the selection in a style's markers, or strip them if present.

        Only the characters immediately bordering the selection are checked.

        Args:
            content: Markdown source
            start: Selection start
            end: Selection end
            kind: Style to toggle

        Returns:
            EditResult. Removing moves the caret left by the prefix length;
            adding puts it after the inserted suffix.
        """
        start, end = self._clamped_range(content, start, end)
        style = StyleKind.coerce(kind)
        if style is None:
            logger.debug(f"Ignoring unknown style {kind!r}")
            return EditResult(content, start)

        if self._is_wrapped(content, start, end, style):
            return self._strip_bordering(content, start, end, style)
        return self._wrap(content, start, end, style)

    def apply_inline_style(
        self,
        content: str,
        start: int,
        end: int,
        kind: Union[StyleKind, str],
        enable: bool
    ) -> EditResult:
        """
        Explicitly add or remove a style on the selection.

        Removing first unwraps marker pairs inside the selection; failing
        that it strips markers bordering the selection. If neither exists
        the source is returned unchanged.
        """
        start, end = self._clamped_range(content, start, end)
        style = StyleKind.coerce(kind)
        if style is None:
            logger.debug(f"Ignoring unknown style {kind!r}")
            return EditResult(content, start)

        if enable:
            return self._wrap(content, start, end, style)

        selected = content[start:end]
        unwrapped = self._unwrap_pairs(selected, style)
        if unwrapped != selected:
            return EditResult(
                content[:start] + unwrapped + content[end:],
                start + len(unwrapped)
            )

        if self._is_wrapped(content, start, end, style):
            return self._strip_bordering(content, start, end, style)

        return EditResult(content, start)

    # --- Line-scoped blocks ---

    def toggle_heading(self, content: str, position: int) -> EditResult:
        """
        Cycle the heading level of the caret's line: none, 1, 2, ... 6, none.

        The caret keeps its numeric offset (clamped to the new length) even
        though the line's length changes.
        """
        position = self._clamped(content, position)
        lines = content.split("\n")
        index, _ = locate_line(lines, position)
        line = lines[index]

        match = HEADING_RE.match(line)
        if match:
            level = len(match.group(1))
            if level >= MAX_HEADING_LEVEL:
                # hashes plus the one separator "# " added
                lines[index] = line[level + 1:]
            else:
                lines[index] = "#" * (level + 1) + line[level:]
        else:
            lines[index] = "# " + line

        new_content = "\n".join(lines)
        return EditResult(new_content, clamp(position, len(new_content)))

    def toggle_list(
        self,
        content: str,
        position: int,
        kind: Union[ListKind, str] = ListKind.UNORDERED
    ) -> EditResult:
        """
        Toggle a list marker on the caret's line.

        An existing "- " item (with or without a checkbox) loses its marker;
        any other line gets the marker for kind. The caret moves right by the
        marker length when adding and stays put when removing.
        """
        position = self._clamped(content, position)
        list_kind = ListKind.coerce(kind)
        if list_kind is None:
            logger.debug(f"Ignoring unknown list kind {kind!r}")
            return EditResult(content, position)

        return self._toggle_line_marker(
            content,
            position,
            LIST_ITEM_RE.match,
            lambda line: LIST_MARKER_STRIP_RE.sub("", line, count=1),
            LIST_MARKERS[list_kind]
        )

    def toggle_blockquote(self, content: str, position: int) -> EditResult:
        """Toggle a "> " marker on the caret's line."""
        position = self._clamped(content, position)
        return self._toggle_line_marker(
            content,
            position,
            BLOCKQUOTE_RE.match,
            lambda line: BLOCKQUOTE_STRIP_RE.sub("", line, count=1),
            BLOCKQUOTE_MARKER
        )

    # --- Templates ---

    def insert_code_block(self, content: str, position: int, language: str = "") -> EditResult:
        """Insert a fenced code block; caret at the start of the placeholder."""
        require_text("language", language)
        position = self._clamped(content, position)
        placeholder = self.config.code_placeholder
        opening = f"\n```{language}\n"
        block = f"{opening}{placeholder}\n```\n"
        return self._insert(content, position, block, len(opening))

    def insert_horizontal_rule(self, content: str, position: int) -> EditResult:
        position = self._clamped(content, position)
        rule = f"\n{self.config.horizontal_rule}\n"
        return self._insert(content, position, rule, len(rule))

    def insert_image(
        self,
        content: str,
        position: int,
        url: str = "",
        alt: Optional[str] = None
    ) -> EditResult:
        """Insert ![alt](url); caret lands after it."""
        require_text("url", url)
        if alt is None:
            alt = self.config.default_image_alt
        require_text("alt", alt)
        position = self._clamped(content, position)
        image = f"![{alt}]({url})"
        return self._insert(content, position, image, len(image))

    def insert_math(
        self,
        content: str,
        position: int,
        latex: str = "",
        is_block: bool = False
    ) -> EditResult:
        """
        Insert a math formula.

        Block formulas go on their own lines between "$$" fences; inline
        formulas are wrapped in "$" and padded with spaces. The caret lands
        at the start of the formula text.
        """
        require_text("latex", latex)
        position = self._clamped(content, position)
        opening = "\n$$\n" if is_block else " $"
        closing = "\n$$\n" if is_block else "$ "
        return self._insert(content, position, opening + latex + closing, len(opening))

    # --- Helpers ---

    @staticmethod
    def _clamped(content: str, position: int) -> int:
        require_text("content", content)
        require_offset("position", position)
        return clamp(position, len(content))

    @staticmethod
    def _clamped_range(content: str, start: int, end: int) -> Tuple[int, int]:
        require_text("content", content)
        require_offset("start", start)
        require_offset("end", end)
        return clamp_range(start, end, len(content))

    @staticmethod
    def _insert(content: str, position: int, text: str, caret_advance: int) -> EditResult:
        return EditResult(content[:position] + text + content[position:], position + caret_advance)

    @staticmethod
    def _is_wrapped(content: str, start: int, end: int, style: StyleKind) -> bool:
        """Check whether the selection is bordered by the style's markers."""
        if style in (StyleKind.BOLD, StyleKind.ITALIC):
            # "*" vs "**": look at whole asterisk runs, not just the
            # characters next to the selection
            before = run_length_before(content, start, "*")
            after = run_length_after(content, end, "*")
            if style is StyleKind.ITALIC:
                # two even runs are bold pairs only
                return before >= 1 and after >= 1 and (before % 2 == 1 or after % 2 == 1)
            return before >= 2 and after >= 2

        prefix, suffix = STYLE_MARKERS[style]
        return content[:start].endswith(prefix) and content.startswith(suffix, end)

    @staticmethod
    def _wrap(content: str, start: int, end: int, style: StyleKind) -> EditResult:
        prefix, suffix = STYLE_MARKERS[style]
        return EditResult(
            content[:start] + prefix + content[start:end] + suffix + content[end:],
            end + len(prefix) + len(suffix)
        )

    @staticmethod
    def _strip_bordering(content: str, start: int, end: int, style: StyleKind) -> EditResult:
        prefix, suffix = STYLE_MARKERS[style]
        return EditResult(
            content[:start - len(prefix)] + content[start:end] + content[end + len(suffix):],
            start - len(prefix)
        )

    @staticmethod
    def _unwrap_pairs(text: str, style: StyleKind) -> str:
        """Remove every paired occurrence of the style's exact markers."""
        prefix, suffix = STYLE_MARKERS[style]

        spans: List[Tuple[int, int]] = []
        if style in TAG_STYLES:
            opens = find_occurrences(text, prefix)
            closes = find_occurrences(text, suffix)
            for open_pos, close_pos in zip(opens, closes):
                if close_pos >= open_pos + len(prefix):
                    spans.append((open_pos, open_pos + len(prefix)))
                    spans.append((close_pos, close_pos + len(suffix)))
        else:
            positions = find_marker_positions(text, prefix, MARKER_EXCLUSIONS.get(style, ()))
            for open_pos, close_pos in pair_positions(positions):
                spans.append((open_pos, open_pos + len(prefix)))
                spans.append((close_pos, close_pos + len(suffix)))

        if not spans:
            return text

        pieces = []
        cursor = 0
        for span_start, span_end in sorted(spans):
            pieces.append(text[cursor:span_start])
            cursor = span_end
        pieces.append(text[cursor:])
        return "".join(pieces)

    @staticmethod
    def _toggle_line_marker(content, position, is_marked, strip, marker) -> EditResult:
        lines = content.split("\n")
        index, _ = locate_line(lines, position)
        line = lines[index]

        if is_marked(line):
            lines[index] = strip(line)
            caret = position
        else:
            lines[index] = marker + line.lstrip()
            caret = position + len(marker)

        new_content = "\n".join(lines)
        return EditResult(new_content, clamp(caret, len(new_content)))


_default_editor = MarkdownEditor()


def insert_text(content: str, position: int, text: str) -> EditResult:
    return _default_editor.insert_text(content, position, text)


def toggle_inline_style(content: str, start: int, end: int, kind) -> EditResult:
    return _default_editor.toggle_inline_style(content, start, end, kind)


def apply_inline_style(content: str, start: int, end: int, kind, enable: bool) -> EditResult:
    return _default_editor.apply_inline_style(content, start, end, kind, enable)


def toggle_heading(content: str, position: int) -> EditResult:
    return _default_editor.toggle_heading(content, position)


def toggle_list(content: str, position: int, kind=ListKind.UNORDERED) -> EditResult:
    return _default_editor.toggle_list(content, position, kind)


def toggle_blockquote(content: str, position: int) -> EditResult:
    return _default_editor.toggle_blockquote(content, position)


def insert_code_block(content: str, position: int, language: str = "") -> EditResult:
    return _default_editor.insert_code_block(content, position, language)


def insert_horizontal_rule(content: str, position: int) -> EditResult:
    return _default_editor.insert_horizontal_rule(content, position)


def insert_image(content: str, position: int, url: str = "", alt: Optional[str] = None) -> EditResult:
    return _default_editor.insert_image(content, position, url, alt)


def insert_math(content: str, position: int, latex: str = "", is_block: bool = False) -> EditResult:
    return _default_editor.insert_math(content, position, latex, is_block)


def delete_range(content: str, start: int, end: int) -> EditResult:
    return _default_editor.delete_range(content, start, end)


def delete_character(content: str, position: int, kind=DeleteKind.BACKWARD) -> EditResult:
    return _default_editor.delete_character(content, position, kind)


def insert_newline(content: str, position: int) -> EditResult:
    return _default_editor.insert_newline(content, position)

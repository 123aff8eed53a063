"""Unit tests for StyleStateTracker and StyleMemo."""

import pytest
from dualmark.config import Config
from dualmark.markers import ListKind, StyleKind
from dualmark.models import BlockState, StyleSpan
from dualmark.style_state import (
    StyleMemo,
    StyleStateTracker,
    active_block,
    active_heading_level,
    active_styles,
    style_span,
)


@pytest.fixture
def tracker():
    """Create a StyleStateTracker with default configuration."""
    return StyleStateTracker()


class TestActiveStyles:
    """Test marker pairing around an offset."""

    def test_inside_bold(self):
        """Test an offset inside a bold span."""
        styles = active_styles("a **b** c", 4)
        assert styles[StyleKind.BOLD] is True
        assert styles[StyleKind.ITALIC] is False
        assert styles[StyleKind.CODE] is False
        assert styles[StyleKind.UNDERLINE] is False

    def test_reports_every_kind(self, tracker):
        """Test that all styles are present in the result."""
        assert set(tracker.active_styles("text", 2)) == set(StyleKind)

    def test_inside_italic(self, tracker):
        """Test an offset inside an italic span."""
        styles = tracker.active_styles("a *b* c", 3)
        assert styles[StyleKind.ITALIC] is True
        assert styles[StyleKind.BOLD] is False

    def test_bold_italic(self, tracker):
        """Test that *** opens both bold and italic."""
        styles = tracker.active_styles("***x***", 3)
        assert styles[StyleKind.BOLD] is True
        assert styles[StyleKind.ITALIC] is True

    def test_strikethrough(self, tracker):
        """Test strikethrough markers."""
        assert tracker.active_styles("~~gone~~", 4)[StyleKind.STRIKETHROUGH] is True

    def test_code(self, tracker):
        """Test inline code markers."""
        assert tracker.active_styles("use `x` here", 5)[StyleKind.CODE] is True

    def test_underline(self, tracker):
        """Test underline tags."""
        assert tracker.active_styles("<u>under</u>", 5)[StyleKind.UNDERLINE] is True

    def test_before_underline_tag_content(self, tracker):
        """Test that an offset before the opening tag ends is outside."""
        assert tracker.active_styles("<u>under</u>", 0)[StyleKind.UNDERLINE] is False

    def test_highlight(self, tracker):
        """Test highlight tags."""
        assert tracker.active_styles("<mark>hi</mark>", 7)[StyleKind.HIGHLIGHT] is True

    def test_before_and_after_span(self, tracker):
        """Test offsets outside the bold span."""
        assert tracker.active_styles("a **b** c", 0)[StyleKind.BOLD] is False
        assert tracker.active_styles("a **b** c", 8)[StyleKind.BOLD] is False

    def test_markers_outside_window_ignored(self, tracker):
        """Test that markers further than the radius are not seen."""
        content = "**" + "x" * 100 + "**"
        assert tracker.active_styles(content, 51)[StyleKind.BOLD] is False

    def test_larger_window(self):
        """Test that a configured radius widens the scan."""
        tracker = StyleStateTracker(Config(style_window_radius=200))
        content = "**" + "x" * 100 + "**"
        assert tracker.active_styles(content, 51)[StyleKind.BOLD] is True

    @pytest.mark.parametrize("offset", [-5, 100])
    def test_out_of_range_offset(self, tracker, offset):
        """Test that out-of-range offsets are clamped, not errors."""
        styles = tracker.active_styles("**b**", offset)
        assert not any(styles.values())

    def test_non_string_content(self, tracker):
        """Test that non-string content raises TypeError."""
        with pytest.raises(TypeError):
            tracker.active_styles(b"**b**", 2)


class TestHeadingLevel:
    """Test heading detection."""

    def test_heading_line(self):
        """Test an offset on a heading line."""
        assert active_heading_level("## Sub\ntext", 3) == 2

    def test_body_line(self):
        """Test an offset on the line after a heading."""
        assert active_heading_level("## Sub\ntext", 8) == 0

    def test_no_space_is_not_heading(self, tracker):
        """Test that #word is not a heading."""
        assert tracker.active_heading_level("#nospace", 2) == 0

    def test_seven_hashes_is_not_heading(self, tracker):
        """Test that more than six # characters is not a heading."""
        assert tracker.active_heading_level("####### seven", 2) == 0

    def test_level_six(self, tracker):
        """Test the deepest level."""
        assert tracker.active_heading_level("###### deep", 0) == 6


class TestActiveBlock:
    """Test block state of the offset's line."""

    def test_task(self):
        """Test a task item."""
        assert active_block("- [ ] task", 3) == BlockState(list_kind=ListKind.TASK)

    def test_unordered(self, tracker):
        """Test a bullet item."""
        assert tracker.active_block("- item", 3).list_kind is ListKind.UNORDERED

    def test_blockquote(self, tracker):
        """Test a quoted line."""
        assert tracker.active_block("text\n> quote", 7).blockquote is True

    def test_heading(self, tracker):
        """Test a heading line."""
        assert tracker.active_block("### H", 1) == BlockState(heading_level=3)

    def test_plain(self, tracker):
        """Test a line with no block markers."""
        assert tracker.active_block("plain", 1) == BlockState()


class TestStyleSpan:
    """Test local span search."""

    def test_bold_span(self):
        """Test the span of an enclosing bold pair."""
        assert style_span("a **b** c", 4, "bold") == StyleSpan(2, 7)

    def test_underline_span(self, tracker):
        """Test the span of enclosing tags."""
        assert tracker.style_span("x <u>y</u> z", 6, StyleKind.UNDERLINE) == StyleSpan(2, 10)

    def test_missing_markers(self, tracker):
        """Test the empty span when no markers surround the offset."""
        span = tracker.style_span("plain", 2, "bold")
        assert span == StyleSpan(2, 2)
        assert span.is_empty

    def test_unknown_kind(self, tracker):
        """Test the empty span for an unknown style."""
        assert tracker.style_span("**b**", 2, "blink") == StyleSpan(2, 2)

    def test_clamped_offset(self, tracker):
        """Test that the empty span sits at the clamped offset."""
        assert tracker.style_span("abc", 50, "bold") == StyleSpan(3, 3)

    def test_local_pairing_can_disagree(self, tracker):
        """Test that span search ignores global pairing on unbalanced input."""
        content = "**a** b **c"
        assert tracker.active_styles(content, 7)[StyleKind.BOLD] is False
        assert tracker.style_span(content, 7, "bold") == StyleSpan(3, 10)


class TestSnapshot:
    """Test snapshots and the caller-owned memo."""

    def test_snapshot(self, tracker):
        """Test that a snapshot combines styles and heading level."""
        snapshot = tracker.snapshot("# a **b** c", 6)
        assert snapshot.styles[StyleKind.BOLD] is True
        assert snapshot.heading_level == 1
        assert snapshot.active_kinds() == [StyleKind.BOLD]

    def test_memo_serves_cached_result(self, tracker, monkeypatch):
        """Test that a repeated query is answered from the memo."""
        memo = StyleMemo()
        calls = []
        original = tracker.active_styles

        def counting(content, offset):
            calls.append(offset)
            return original(content, offset)

        monkeypatch.setattr(tracker, "active_styles", counting)

        first = tracker.snapshot("a **b** c", 4, memo)
        second = tracker.snapshot("a **b** c", 4, memo)

        assert first == second
        assert len(calls) == 1
        assert memo.last == first

    def test_memo_invalidated_on_text_change(self, tracker):
        """Test that a changed text never gets a stale snapshot."""
        memo = StyleMemo()
        assert tracker.snapshot("a **b** c", 4, memo).styles[StyleKind.BOLD] is True

        changed = tracker.snapshot("a b c", 4, memo)
        assert changed.styles[StyleKind.BOLD] is False
        assert len(memo) == 1

    def test_memo_returns_copies(self, tracker):
        """Test that mutating a returned snapshot does not corrupt the memo."""
        memo = StyleMemo()
        tracker.snapshot("a **b** c", 4, memo)
        cached = tracker.snapshot("a **b** c", 4, memo)
        cached.styles[StyleKind.BOLD] = False

        assert tracker.snapshot("a **b** c", 4, memo).styles[StyleKind.BOLD] is True

    def test_explicit_invalidate(self, tracker):
        """Test clearing the memo."""
        memo = StyleMemo()
        tracker.snapshot("text", 1, memo)
        tracker.snapshot("text", 2, memo)
        assert len(memo) == 2

        memo.invalidate()
        assert len(memo) == 0

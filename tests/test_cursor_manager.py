"""Unit tests for CursorManager."""

import pytest
from unittest.mock import Mock
from dualmark.cursor_manager import CursorManager, HostView
from dualmark.models import SavedPosition


@pytest.fixture
def mock_host():
    """Create a mock host view showing a rendered heading document."""
    host = Mock(spec=HostView)
    host.view_text = Mock(return_value="Title\nBody text")
    host.capture_position = Mock(return_value=SavedPosition(view_offset=8))
    host.apply_anchors = Mock(return_value=False)
    host.place_caret = Mock(return_value=True)
    host.place_caret_at_end = Mock()
    return host


@pytest.fixture
def cursor_manager(mock_host):
    """Create a CursorManager bound to the mock host."""
    return CursorManager(host=mock_host)


class TestSavePosition:
    """Test capturing positions from the host."""

    def test_save_remembers_position(self, cursor_manager):
        """Test that the captured position is kept."""
        position = cursor_manager.save_position()
        assert position == SavedPosition(view_offset=8)
        assert cursor_manager.last_saved_position == position

    def test_save_without_selection(self, cursor_manager, mock_host):
        """Test that a missing selection keeps the previous position."""
        cursor_manager.save_position()
        mock_host.capture_position.return_value = None

        assert cursor_manager.save_position() is None
        assert cursor_manager.last_saved_position == SavedPosition(view_offset=8)


class TestRestorePosition:
    """Test the restore fallback chain."""

    def test_nothing_to_restore(self, cursor_manager, mock_host):
        """Test restoring before anything was saved."""
        assert cursor_manager.restore_position() is False
        mock_host.place_caret.assert_not_called()

    def test_restore_from_anchors(self, cursor_manager, mock_host):
        """Test that valid host anchors win."""
        mock_host.apply_anchors.return_value = True
        position = SavedPosition(view_offset=3, anchors={"node": [0, 1]})

        assert cursor_manager.restore_position(position) is True
        mock_host.apply_anchors.assert_called_once_with(position)
        mock_host.place_caret.assert_not_called()

    def test_stale_anchors_fall_back_to_offset(self, cursor_manager, mock_host):
        """Test falling back to the view offset."""
        position = SavedPosition(view_offset=3, anchors={"node": [0, 1]})

        assert cursor_manager.restore_position(position) is True
        mock_host.place_caret.assert_called_once_with(3)

    def test_no_anchors_skips_host_anchors(self, cursor_manager, mock_host):
        """Test that an empty anchor dict is not offered to the host."""
        cursor_manager.restore_position(SavedPosition(view_offset=2))
        mock_host.apply_anchors.assert_not_called()
        mock_host.place_caret.assert_called_once_with(2)

    def test_offset_clamped_to_view(self, cursor_manager, mock_host):
        """Test that a stale offset past the end is clamped."""
        cursor_manager.restore_position(SavedPosition(view_offset=500))
        mock_host.place_caret.assert_called_once_with(len("Title\nBody text"))

    def test_falls_back_to_end(self, cursor_manager, mock_host):
        """Test the last-resort placement at the end of the view."""
        mock_host.place_caret.return_value = False

        assert cursor_manager.restore_position(SavedPosition(view_offset=2)) is False
        mock_host.place_caret_at_end.assert_called_once()

    def test_restore_last_saved(self, cursor_manager, mock_host):
        """Test restoring the remembered position."""
        cursor_manager.save_position()
        assert cursor_manager.restore_position() is True
        mock_host.place_caret.assert_called_once_with(8)


class TestSourceMapping:
    """Test mapping between saved view positions and source offsets."""

    def test_source_offset(self, cursor_manager):
        """Test mapping the saved view offset into the source."""
        cursor_manager.save_position()
        assert cursor_manager.source_offset("# Title\nBody text") == 10

    def test_source_offset_without_position(self, cursor_manager):
        """Test the default when nothing was saved."""
        assert cursor_manager.source_offset("# Title\nBody text") == 0

    def test_restore_source_offset(self, cursor_manager, mock_host):
        """Test placing the caret for an edit result's source offset."""
        assert cursor_manager.restore_source_offset("# Title\nBody text", 10) is True
        mock_host.place_caret.assert_called_once_with(8)
        assert cursor_manager.last_saved_position == SavedPosition(view_offset=8)


class TestSavedPosition:
    """Test descriptor serialization."""

    def test_round_trip(self):
        """Test that host anchors survive serialization untouched."""
        position = SavedPosition(view_offset=4, selection_end=9, is_collapsed=False,
                                 anchors={"node_index": 2})
        assert SavedPosition.from_dict(position.to_dict()) == position

    def test_from_minimal_dict(self):
        """Test that only view_offset is required."""
        assert SavedPosition.from_dict({"view_offset": 1}) == SavedPosition(view_offset=1)

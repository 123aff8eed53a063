"""Save and restore caret positions across re-renders of the host view."""

import logging
from typing import Optional, Protocol

from .models import SavedPosition
from .offsets import clamp
from .position_mapper import PositionMapper

logger = logging.getLogger(__name__)


class HostView(Protocol):
    """What the host view layer provides. The engine never implements it."""

    def view_text(self) -> str:
        """Return the flattened text the view currently shows."""

    def capture_position(self) -> Optional[SavedPosition]:
        """Describe the current caret, or None when there is no selection."""

    def apply_anchors(self, position: SavedPosition) -> bool:
        """Restore the caret from the host's own anchors. False if they went stale."""

    def place_caret(self, view_offset: int) -> bool:
        """Put the caret at view_offset. False if the host could not resolve it."""

    def place_caret_at_end(self) -> None:
        """Put the caret at the end of the view."""


class CursorManager:
    """
    Keeps the caret stable while the host view is re-rendered.

    Restoring tries, in order:
    1. The host's own anchors recorded in the saved position
    2. The saved view offset, clamped to the current view text
    3. The end of the view
    """

    def __init__(self, host: HostView, mapper: Optional[PositionMapper] = None):
        """
        Initialize the CursorManager.

        Args:
            host: The host view layer
            mapper: Offset mapper; a new PositionMapper by default
        """
        self.host = host
        self.mapper = mapper or PositionMapper()
        self.last_saved_position: Optional[SavedPosition] = None

    def save_position(self) -> Optional[SavedPosition]:
        """Capture the host's caret and remember it."""
        position = self.host.capture_position()
        if position is not None:
            self.last_saved_position = position
        return position

    def restore_position(self, position: Optional[SavedPosition] = None) -> bool:
        """
        Re-apply a saved position to the host view.

        Args:
            position: Position to restore; defaults to the last saved one

        Returns:
            True if the caret was restored from anchors or offset, False if
            it fell back to the end of the view or there was nothing to restore
        """
        position = position or self.last_saved_position
        if position is None:
            return False

        if position.anchors and self.host.apply_anchors(position):
            return True

        view_offset = clamp(position.view_offset, len(self.host.view_text()))
        if self.host.place_caret(view_offset):
            return True

        logger.debug(f"Could not place caret at view offset {view_offset}, moving to end")
        self.host.place_caret_at_end()
        return False

    def source_offset(self, source_text: str, position: Optional[SavedPosition] = None) -> int:
        """
        Map a saved view position into the Markdown source.

        Returns:
            Source offset, or 0 when no position has been saved
        """
        position = position or self.last_saved_position
        if position is None:
            return 0
        return self.mapper.to_source_offset(self.host.view_text(), source_text, position.view_offset)

    def restore_source_offset(self, source_text: str, source_offset: int) -> bool:
        """
        Place the caret at the view position matching a source offset.

        Call after the host has re-rendered source_text, e.g. with the
        cursor_position of an EditResult.
        """
        view_offset = self.mapper.to_view_offset(source_text, self.host.view_text(), source_offset)
        position = SavedPosition(view_offset=view_offset)
        self.last_saved_position = position
        return self.restore_position(position)

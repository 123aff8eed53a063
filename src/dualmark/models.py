"""Value types passed into and returned from the engine."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .markers import ListKind, StyleKind


@dataclass
class EditResult:
    """New Markdown source plus the caret offset after an edit."""
    content: str
    cursor_position: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "content": self.content,
            "cursor_position": self.cursor_position
        }


@dataclass
class StyleSpan:
    """Source range covered by one style instance, end exclusive."""
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass
class BlockState:
    """Block-level constructs on the line containing an offset."""
    heading_level: int = 0
    list_kind: Optional[ListKind] = None
    blockquote: bool = False


@dataclass
class StyleSnapshot:
    """Styles and heading level reported for one offset."""
    styles: Dict[StyleKind, bool] = field(default_factory=dict)
    heading_level: int = 0

    def copy(self) -> "StyleSnapshot":
        return StyleSnapshot(styles=dict(self.styles), heading_level=self.heading_level)

    def active_kinds(self) -> list:
        """Styles that are switched on, in marker-table order."""
        return [kind for kind, active in self.styles.items() if active]


@dataclass
class SavedPosition:
    """
    Caret position captured by the host view.

    Only view_offset is read by the engine. anchors holds whatever richer
    placement data the host understands (node paths, scroll state, ...).
    """
    view_offset: int
    selection_end: Optional[int] = None
    is_collapsed: bool = True
    anchors: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "view_offset": self.view_offset,
            "selection_end": self.selection_end,
            "is_collapsed": self.is_collapsed,
            "anchors": dict(self.anchors)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SavedPosition":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            view_offset=data["view_offset"],
            selection_end=data.get("selection_end"),
            is_collapsed=data.get("is_collapsed", True),
            anchors=dict(data.get("anchors") or {})
        )

"""Main entry point for dualmark: inspect the edit engine's view of a file."""

import importlib.metadata
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .config import Config
from .markers import StyleKind
from .position_mapper import PositionMapper
from .style_state import StyleStateTracker
from .view_text import flatten_markdown


def get_version() -> str:
    try:
        return importlib.metadata.version("dualmark")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def render_report(source: str, offset: int, console: Console, config: Optional[Config] = None) -> None:
    """
    Print the styles, block state and view mapping for one source offset.

    Args:
        source: Markdown source
        offset: Source offset to inspect
        console: Rich console to print to
        config: Engine configuration
    """
    tracker = StyleStateTracker(config)
    mapper = PositionMapper()

    view_text = flatten_markdown(source)
    snapshot = tracker.snapshot(source, offset)
    block = tracker.active_block(source, offset)

    styles = Table(title=f"Styles at offset {offset}")
    styles.add_column("Style")
    styles.add_column("Active")
    styles.add_column("Span")
    for kind in StyleKind:
        span = tracker.style_span(source, offset, kind)
        span_text = "-" if span.is_empty else f"{span.start}..{span.end}"
        styles.add_row(kind.value, "yes" if snapshot.styles[kind] else "no", span_text)
    console.print(styles)

    blocks = Table(title="Block")
    blocks.add_column("Heading level")
    blocks.add_column("List")
    blocks.add_column("Blockquote")
    blocks.add_row(
        str(block.heading_level),
        block.list_kind.value if block.list_kind else "-",
        "yes" if block.blockquote else "no"
    )
    console.print(blocks)

    view_offset = mapper.to_view_offset(source, view_text, offset)
    strategy = "proportional" if mapper.is_simple(source) else "line-based"
    console.print(f"View offset: {view_offset} of {len(view_text)} ({strategy})")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv

    if os.environ.get("DUALMARK_DEBUG"):
        logging.basicConfig(level=logging.DEBUG)

    if args and args[0] in ("--version", "-V"):
        print(get_version())
        return 0

    if len(args) != 2:
        print("Usage: dualmark FILE OFFSET")
        return 1

    file_path, raw_offset = args
    if not Path(file_path).exists():
        print(f"Error: File not found: {file_path}")
        return 1

    try:
        offset = int(raw_offset)
    except ValueError:
        print(f"Error: Offset must be an integer: {raw_offset}")
        return 1

    try:
        source = Path(file_path).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        print(f"Error: File is not valid UTF-8: {file_path}")
        return 1
    except OSError as e:
        print(f"Error: Could not read {file_path}: {e}")
        return 1

    render_report(source, offset, Console(), Config.load())
    return 0


if __name__ == "__main__":
    sys.exit(main())

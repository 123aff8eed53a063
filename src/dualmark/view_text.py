"""Flatten Markdown into the marker-free text a rendered view displays."""

from typing import List, Optional

import markdown_it
from markdown_it.token import Token


def _parser() -> markdown_it.MarkdownIt:
    # CommonMark keeps inline HTML (<u>, <mark>) as html_inline tokens
    return markdown_it.MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _inline_text(token: Token) -> str:
    """Concatenate the visible text of an inline token's children."""
    parts = []
    for child in token.children or []:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif child.type == "image":
            parts.append(child.content)
        # Formatting open/close tokens and inline HTML render no text
    return "".join(parts)


def flatten_markdown(source: str, md: Optional[markdown_it.MarkdownIt] = None) -> str:
    """
    Render Markdown and return the text a rendered view would show.

    Each text block (paragraph, heading, list item, table cell, code
    block) becomes one or more lines. Inline markup and HTML tags are
    dropped; image alt text is kept. Horizontal rules and HTML blocks
    contribute nothing.

    Args:
        source: Markdown source
        md: Parser to use; defaults to CommonMark with tables and strikethrough

    Returns:
        Flattened view text with blocks joined by newlines
    """
    if not isinstance(source, str):
        raise TypeError(f"source must be str, not {type(source).__name__}")

    tokens = (md or _parser()).parse(source)

    blocks: List[str] = []
    for token in tokens:
        if token.type == "inline":
            blocks.append(_inline_text(token))
        elif token.type in ("fence", "code_block"):
            blocks.append(token.content.rstrip("\n"))

    return "\n".join(blocks)

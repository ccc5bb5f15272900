from __future__ import annotations

from typing import Iterable

from .models import Block, HeadingBlock, ParagraphBlock, TableBlock
from .tables import table_rows_to_markdown
from .text_utils import escape_md


def render_block(block: Block) -> str:
    if isinstance(block, HeadingBlock):
        return "#" * block.level + " " + escape_md(block.text)
    if isinstance(block, TableBlock):
        return table_rows_to_markdown(block.rows) or ""
    if isinstance(block, ParagraphBlock):
        return escape_md(block.text)
    raise TypeError(f"unsupported block: {type(block).__name__}")


def render_markdown(title: str, blocks: Iterable[Block]) -> str:
    """
    Title as the only level-1 heading, then every block separated by a blank
    line. Output ends with exactly one newline.
    """
    parts = ["# " + escape_md(title)]
    for b in blocks:
        s = render_block(b)
        if s:
            parts.append(s)
    return "\n\n".join(parts).strip() + "\n"

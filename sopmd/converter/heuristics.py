from __future__ import annotations

import re
from typing import Optional, NamedTuple


# "1.0 Purpose", "6.1 Inspect equipment", "4 - Scope"
_NUMBERED_HEADING_RE = re.compile(
    r"^(?P<num>\d+(?:\.\d+)*)(?:\s+|\s*-\s*)(?P<title>.+)$"
)
# Outline/list starts that always begin a new block.
_BLOCK_START_RE = re.compile(r"^(\d+(?:\.\d+)*\b|[A-Za-z]\.|[A-Za-z]\)|[-•])")
_SENTENCE_END_RE = re.compile(r"[.!?:;]$")


class NumberedHeading(NamedTuple):
    num: str
    title: str

    @property
    def level(self) -> int:
        # "6.0" is the section itself, so trailing ".0" parts add no depth.
        depth = self.num
        while depth.endswith(".0"):
            depth = depth[:-2]
        return min(6, 2 + depth.count("."))

    @property
    def top_level(self) -> str:
        return self.num.split(".", 1)[0]

    @property
    def text(self) -> str:
        return f"{self.num} {self.title}"


def parse_numbered_heading(text: str) -> Optional[NumberedHeading]:
    m = _NUMBERED_HEADING_RE.match((text or "").strip())
    if not m:
        return None
    title = m.group("title").strip()
    if not title:
        return None
    return NumberedHeading(m.group("num"), title)


def starts_new_block(text: str) -> bool:
    return bool(_BLOCK_START_RE.match((text or "").lstrip()))


def should_merge(curr: Optional[str], nxt: Optional[str]) -> bool:
    """
    Whether `nxt` continues the paragraph that `curr` is part of.

    Never merge into a heading or list item, never across sentence-ending
    punctuation; otherwise merge only when the next line starts lower-case.
    """
    if not curr or not curr.strip() or not nxt or not nxt.strip():
        return False
    c = curr.rstrip()
    n = nxt.lstrip()
    if starts_new_block(n):
        return False
    if _SENTENCE_END_RE.search(c):
        return False
    return n[0].islower()

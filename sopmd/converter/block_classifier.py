from __future__ import annotations

import enum
import logging
from typing import Optional, Sequence

from .config import ConvertConfig
from .heuristics import parse_numbered_heading, should_merge
from .models import Block, HeadingBlock, Line, ParagraphBlock, TableBlock
from .tables import compute_column_anchors, extract_table, looks_like_process_table_header, looks_tabular

logger = logging.getLogger(__name__)


class SegmentState(enum.Enum):
    DEFAULT = "default"
    IN_PROCESS_SECTION = "in_process_section"


class BlockSegmenter:
    """
    Walks the cleaned, page-ordered line stream and emits heading, paragraph
    and table blocks.

    The paragraph buffer survives state changes and page breaks; headings,
    tables and the end of input flush it.
    """

    def __init__(self, cfg: Optional[ConvertConfig] = None):
        self.cfg = cfg or ConvertConfig()
        self.state = SegmentState.DEFAULT
        self._buf: list[str] = []
        self._blocks: list[Block] = []

    def _flush(self) -> None:
        if self._buf:
            self._blocks.append(ParagraphBlock(text=" ".join(self._buf)))
            self._buf = []

    def _try_table(self, lines: Sequence[Line], i: int) -> int:
        """Lines consumed by a process table at `i`, 0 when there is none."""
        anchors = compute_column_anchors(lines, i, self.cfg)
        if not looks_tabular(lines, i, anchors, self.cfg):
            logger.debug("table header %r rejected: not tabular", lines[i].text)
            return 0
        self._flush()
        rows, consumed = extract_table(lines, i, anchors)
        if not rows:
            logger.debug("table header %r rejected: fewer than 2 rows", lines[i].text)
            return 0
        self._blocks.append(TableBlock(rows=rows))
        logger.debug("table with %d rows at %r", len(rows), lines[i].text)
        return consumed

    def segment(self, lines: Sequence[Line]) -> list[Block]:
        self.state = SegmentState.DEFAULT
        self._buf = []
        self._blocks = []

        i = 0
        while i < len(lines):
            text = lines[i].text.strip()

            heading = parse_numbered_heading(text)
            if heading is not None:
                self._flush()
                self._blocks.append(HeadingBlock(level=heading.level, text=heading.text))
                if heading.top_level == self.cfg.process_section_number:
                    self.state = SegmentState.IN_PROCESS_SECTION
                else:
                    self.state = SegmentState.DEFAULT
                i += 1
                continue

            if self.state is SegmentState.IN_PROCESS_SECTION and looks_like_process_table_header(lines[i], self.cfg):
                consumed = self._try_table(lines, i)
                if consumed:
                    i += consumed
                    continue

            self._buf.append(text)
            nxt = lines[i + 1].text if i + 1 < len(lines) else None
            if not should_merge(text, nxt):
                self._flush()
            i += 1

        self._flush()
        return self._blocks


def segment_blocks(lines: Sequence[Line], cfg: Optional[ConvertConfig] = None) -> list[Block]:
    return BlockSegmenter(cfg).segment(lines)

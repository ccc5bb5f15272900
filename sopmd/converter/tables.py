from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import ConvertConfig
from .heuristics import parse_numbered_heading
from .models import Line
from .text_utils import escape_md

logger = logging.getLogger(__name__)


def looks_like_process_table_header(line: Line, cfg: Optional[ConvertConfig] = None) -> bool:
    cfg = cfg or ConvertConfig()
    t = line.text.lower()
    return all(tok.lower() in t for tok in cfg.process_table_header_tokens)


def compute_column_anchors(lines: Sequence[Line], start: int, cfg: Optional[ConvertConfig] = None) -> list[float]:
    """
    Column left edges for the table whose header is `lines[start]`.

    The header tokens' own left edges win when all of them are present;
    otherwise large word gaps over the lookahead window are clustered.
    """
    cfg = cfg or ConvertConfig()
    tokens = {t.lower() for t in cfg.process_table_header_tokens}
    anchors = sorted({w.left for w in lines[start].words if w.text.lower() in tokens})
    if len(anchors) == len(tokens):
        return anchors

    pts: list[float] = []
    end = min(len(lines), start + cfg.table_lookahead_lines)
    for i in range(start, end):
        ws = lines[i].words
        if len(ws) < 2:
            continue
        pts.append(ws[0].left)
        for a, b in zip(ws, ws[1:]):
            if b.left - a.right >= cfg.large_gap_threshold:
                pts.append(b.left)
    if not pts:
        return anchors

    pts.sort()
    merged = [pts[0]]
    for x in pts[1:]:
        if abs(x - merged[-1]) <= cfg.column_anchor_merge_tolerance:
            merged[-1] = (merged[-1] + x) / 2.0
        else:
            merged.append(x)
    return merged[: cfg.max_table_columns]


def slice_into_columns(line: Line, anchors: Sequence[float]) -> list[str]:
    """Assign each word to its nearest anchor by left edge."""
    if not anchors:
        return []
    buckets: list[list[str]] = [[] for _ in anchors]
    for w in line.words:
        best = min(range(len(anchors)), key=lambda k: abs(w.left - anchors[k]))
        buckets[best].append(w.text)
    return [" ".join(b).strip() for b in buckets]


def count_filled_columns(line: Line, anchors: Sequence[float]) -> int:
    return sum(1 for c in slice_into_columns(line, anchors) if c)


def looks_tabular(lines: Sequence[Line], start: int, anchors: Sequence[float], cfg: Optional[ConvertConfig] = None) -> bool:
    """Header plus the next two lines each filling at least two columns."""
    cfg = cfg or ConvertConfig()
    if len(anchors) < cfg.min_table_anchors:
        return False
    peek = lines[start + 1:start + 3]
    ok = sum(1 for ln in peek if count_filled_columns(ln, anchors) >= 2)
    return ok >= 2


def _ends_table(line: Line, anchors: Sequence[float]) -> bool:
    h = parse_numbered_heading(line.text)
    if h is None:
        return False
    # "2 Tech Record results" is a step row; "6.2 Records" is a new section.
    if "." not in h.num and count_filled_columns(line, anchors) >= 2:
        return False
    return True


def extract_table(lines: Sequence[Line], start: int, anchors: Sequence[float]) -> tuple[list[list[str]], int]:
    """
    Rows for the table headed by `lines[start]` and the number of lines it
    consumed. Rows whose first column is empty are wrapped text and get
    folded into the previous row. Returns no rows when only the header survives.
    """
    block = [lines[start]]
    i = start + 1
    while i < len(lines):
        ln = lines[i]
        if _ends_table(ln, anchors):
            break
        if count_filled_columns(ln, anchors) < 1:
            break
        block.append(ln)
        i += 1

    width = len(anchors)
    rows: list[list[str]] = []
    for ln in block:
        cols = slice_into_columns(ln, anchors)
        if len(rows) > 1 and not cols[0]:
            last = rows[-1]
            target = width - 1
            if not last[target] and width > 1:
                target = width - 2
            last[target] = (last[target] + " " + " ".join(c for c in cols[1:] if c)).strip()
            continue
        rows.append(cols)

    if len(rows) < 2:
        return [], len(block)
    return rows, len(block)


def table_rows_to_markdown(rows: Sequence[Sequence[str]]) -> Optional[str]:
    if not rows:
        return None
    width = max(len(r) for r in rows)
    norm = [[escape_md(c) for c in r] + [""] * (width - len(r)) for r in rows]

    md_lines = [
        "| " + " | ".join(norm[0]) + " |",
        "| " + " | ".join(["---"] * width) + " |",
    ]
    for row in norm[1:]:
        md_lines.append("| " + " | ".join(row) + " |")
    return "\n".join(md_lines)

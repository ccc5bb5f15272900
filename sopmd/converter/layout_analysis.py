from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from typing import Iterable, Optional

from .config import ConvertConfig
from .models import HeaderParseResult, Line, Page, Word

logger = logging.getLogger(__name__)


def _round_to(value: float, tol: float) -> float:
    return round(value / tol) * tol


def build_lines(words: Iterable[Word], y_tol: float = 2.0) -> list[Line]:
    """
    Group a page's words into lines keyed on the vertical center snapped to a
    `y_tol` grid. Lines come out top of page first, words left to right.
    """
    buckets: dict[float, list[Word]] = defaultdict(list)
    for w in words:
        t = (w.text or "").strip()
        if not t:
            continue
        if t != w.text:
            w = w.model_copy(update={"text": t})
        buckets[_round_to(w.y, y_tol)].append(w)

    lines: list[Line] = []
    for y in sorted(buckets, reverse=True):
        ln = Line.from_words(y, buckets[y])
        if ln.text.strip():
            lines.append(ln)
    return lines


def build_page(number: int, height: float, words: Iterable[Word], cfg: Optional[ConvertConfig] = None) -> Page:
    cfg = cfg or ConvertConfig()
    page = Page(number=number, height=height, lines=build_lines(words, cfg.line_y_tolerance))
    logger.debug("page %d: %d lines", number, len(page.lines))
    return page


def detect_repeating_lines(pages: list[Page], cfg: Optional[ConvertConfig] = None) -> set[str]:
    """
    Lower-cased texts that recur in the top/bottom `repeat_scan_lines` of enough
    pages to count as running headers/footers.
    """
    cfg = cfg or ConvertConfig()
    n = cfg.repeat_scan_lines
    counts: Counter[str] = Counter()
    for p in pages:
        edge = p.lines[:n] + p.lines[-n:] if n > 0 else []
        seen_on_page: set[str] = set()
        for ln in edge:
            key = ln.text.strip().lower()
            if not key or key in seen_on_page:
                continue
            seen_on_page.add(key)
            counts[key] += 1

    min_hits = math.ceil(max(1.0, len(pages) * cfg.repeat_line_removal_threshold))
    repeated = {t for t, c in counts.items() if c >= min_hits}
    logger.debug("repeating lines (min_hits=%d): %d", min_hits, len(repeated))
    return repeated


def is_noise_line(text: str, cfg: Optional[ConvertConfig] = None) -> bool:
    cfg = cfg or ConvertConfig()
    t = (text or "").strip()
    if not t:
        return False
    low = t.lower()
    if any(low.startswith(s.lower()) for s in cfg.noise_starts_with):
        return True
    return any(p.search(t) for p in cfg.noise_patterns)


def clean_body_lines(
    pages: list[Page],
    repeated: set[str],
    header: HeaderParseResult,
    cfg: Optional[ConvertConfig] = None,
) -> list[Line]:
    """
    Page-ordered body stream with boilerplate, noise and first-page header
    lines removed.
    """
    cfg = cfg or ConvertConfig()
    title_key = header.title.strip().lower() if header.title else None
    out: list[Line] = []
    for pi, page in enumerate(pages):
        for ln in page.lines:
            key = ln.text.strip().lower()
            if key in repeated:
                continue
            if is_noise_line(ln.text, cfg):
                continue
            if pi == 0 and (header.excludes(ln.text) or key == title_key):
                continue
            out.append(ln)
    return out

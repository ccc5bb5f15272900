from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .config import ConvertConfig
from .models import HeaderMetadata, HeaderParseResult, Page
from .text_utils import strip_trailing_colon

logger = logging.getLogger(__name__)


_DOC_RE = re.compile(r"^[A-Z0-9][A-Z0-9\-]{4,}$")
_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_REV_RE = re.compile(r"^[A-Za-z0-9]{1,3}$")
_NAME_RE = re.compile(r"^[A-Za-z]+(?:\s+[A-Za-z'.-]+)+$")
_TRAILING_NAME_RE = re.compile(r"\s([A-Z][a-z]+(?:\s+[A-Z][a-z'.-]+)+)$")
# Titles mix words, numbers and light punctuation: "Phase 2 - Facility Start-Up", "Part 6.0/6.1"
_TITLE_LINE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 \-,()/:]{0,120}$")

_DATE_CODE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}\s+[A-Za-z0-9]+$")
_DOC_PAGE_RE = re.compile(r"^(?P<doc>[A-Z0-9\-]+)\s+(?P<page>\d+\s+of\s+\d+)$", re.IGNORECASE)


def split_combo_value(raw: str) -> tuple[str, str]:
    """
    Split a value row carrying two grid cells, e.g. "06/08/2023 G" or
    "CLG-EN-PR-0175 1 of 4".
    """
    raw = raw or ""
    gaps = [p.strip() for p in re.split(r"\s{2,}", raw) if p.strip()]
    if len(gaps) >= 2:
        return gaps[0], gaps[1]

    s = raw.strip()
    if _DATE_CODE_RE.match(s):
        date, code = s.split(None, 1)
        return date, code.strip()
    m = _DOC_PAGE_RE.match(s)
    if m:
        return m.group("doc"), m.group("page")

    mid = len(raw) // 2
    idx = raw.rfind(" ", 0, mid + 1)
    if idx <= 0:
        idx = raw.find(" ", mid)
    if idx > 0:
        return raw[:idx].strip(), raw[idx + 1:].strip()
    return s, ""


@dataclass
class _GridLine:
    text: str
    sources: tuple[str, ...]


class HeaderParser:
    """
    Reads the SOP banner + key/value grid at the top of the first page.

    Grid keys usually sit on one row and their values on the row below, so a
    key row is paired with the next non-key row. Every field is optional; a
    value is kept only when it passes that field's validator.
    """

    def __init__(self, cfg: Optional[ConvertConfig] = None):
        self.cfg = cfg or ConvertConfig()
        labels = "|".join(p for _, p in self.cfg.header_keys)
        self._key_line_re = re.compile(rf"^(?:{labels})\s*:", re.IGNORECASE)
        self._key_only_re = re.compile(rf"^(?:{labels})\s*:\s*$", re.IGNORECASE)
        self._key_res = {
            name: re.compile(rf"^(?:{pat})\s*:\s*(?P<val>.*)$", re.IGNORECASE)
            for name, pat in self.cfg.header_keys
        }
        self._key_anywhere_res = {
            name: re.compile(rf"\b(?:{pat})\s*:", re.IGNORECASE)
            for name, pat in self.cfg.header_keys
        }
        mid_words = [re.escape(w) for w in self.cfg.banner_mid.split()]
        self._banner_re = re.compile(r"\b" + r"\s+".join(mid_words) + r"\b", re.IGNORECASE)

    # ---- helpers

    def is_key_line(self, text: str) -> bool:
        return bool(self._key_line_re.match((text or "").strip()))

    def _key_value(self, text: str) -> Optional[tuple[str, str]]:
        for name, rx in self._key_res.items():
            m = rx.match(text)
            if m:
                return name, m.group("val").strip()
        return None

    def _find_key(self, grid: list[_GridLine], name: str) -> int:
        rx = self._key_res[name]
        for i, g in enumerate(grid):
            if rx.match(g.text):
                return i
        return -1

    def _value_of(self, grid: list[_GridLine], idx: int, skip: set[int]) -> Optional[tuple[int, str]]:
        """Value for the key row at `idx`: inline after the colon, else the next non-key row."""
        kv = self._key_value(grid[idx].text)
        if kv and kv[1] and not self.is_key_line(kv[1]):
            return idx, kv[1]
        end = min(len(grid), idx + 1 + self.cfg.header_value_lookahead)
        for j in range(idx + 1, end):
            v = grid[j].text
            if not v.strip():
                continue
            if self.is_key_line(v):
                break
            if j in skip:
                continue
            return j, v
        return None

    def _find_banner(self, raw: list[str]) -> list[str]:
        # First window of `banner_window_lines` rows, starting in the top
        # `banner_scan_lines`, whose joined text holds the banner.
        k = self.cfg.banner_window_lines
        for i in range(min(len(raw), self.cfg.banner_scan_lines)):
            window = raw[i:i + k]
            if self._banner_re.search(" ".join(window)):
                return window
        return []

    def _normalize_grid(self, raw: list[str], dropped: set[str]) -> list[_GridLine]:
        # "Key:" on its own line takes the following line as its value.
        grid: list[_GridLine] = []
        i = 0
        while i < len(raw):
            text = raw[i]
            if self._key_only_re.match(text) and i + 1 < len(raw):
                value = raw[i + 1]
                grid.append(_GridLine(f"{strip_trailing_colon(text)}: {value}", (text, value)))
                dropped.add(text.lower())
                dropped.add(value.lower())
                i += 2
                continue
            grid.append(_GridLine(text, (text,)))
            i += 1
        return grid

    # ---- main entry

    def parse(self, page: Optional[Page]) -> HeaderParseResult:
        cfg = self.cfg
        excluded: set[str] = {cfg.banner_top.lower(), cfg.banner_mid.lower()}
        if page is None:
            return HeaderParseResult(excluded_lines=frozenset(excluded))

        raw = [ln.text.strip() for ln in page.lines[: cfg.header_scan_lines]]

        # The SOP banner may be broken over up to three lines.
        banner = self._find_banner(raw)
        excluded.update(t.lower() for t in banner)

        grid = self._normalize_grid(raw, excluded)
        meta: dict[str, str] = {}

        def mark(idx: int) -> None:
            for s in grid[idx].sources:
                if s.strip():
                    excluded.add(s.strip().lower())

        doc_idx = self._find_key(grid, "doc")
        eff_idx = self._find_key(grid, "eff")
        rev_idx = self._find_key(grid, "rev")
        org_idx = self._find_key(grid, "org")
        appr_idx = self._find_key(grid, "appr")
        appr_present = appr_idx >= 0 or any(self._key_anywhere_res["appr"].search(g.text) for g in grid)

        # Document No. (a "Page" counter may share the value row)
        doc_value_idx = -1
        if doc_idx >= 0:
            found = self._value_of(grid, doc_idx, set())
            if found:
                doc_value_idx, value = found
                dv, _ = split_combo_value(value)
                if _DOC_RE.match(dv):
                    meta["doc"] = dv
                mark(doc_idx)
                mark(doc_value_idx)

        # Title: word-like lines between the document number value and the Effective Date key.
        title = None
        title_idx: set[int] = set()
        if doc_value_idx >= 0 and eff_idx > doc_value_idx:
            parts: list[str] = []
            for j in range(doc_value_idx + 1, eff_idx):
                cand = grid[j].text
                if not cand.strip():
                    continue
                if self.is_key_line(cand):
                    break
                if not _TITLE_LINE_RE.match(cand):
                    continue
                parts.append(cand)
                title_idx.add(j)
                mark(j)
            if parts:
                title = " ".join(parts)

        # Effective Date / Revision, usually one "06/08/2023 G" row
        if eff_idx >= 0:
            found = self._value_of(grid, eff_idx, title_idx)
            if found:
                j, value = found
                dv, rv = split_combo_value(value)
                if _DATE_RE.match(dv):
                    meta["eff"] = dv
                if _REV_RE.match(rv):
                    meta["rev"] = rv
                mark(eff_idx)
                mark(j)
        if "rev" not in meta and rev_idx >= 0:
            found = self._value_of(grid, rev_idx, title_idx)
            if found and _REV_RE.match(found[1].strip()):
                meta["rev"] = found[1].strip()
                mark(rev_idx)
                mark(found[0])

        # Accountable Organization / Management Approval may share a value row.
        if org_idx >= 0:
            found = self._value_of(grid, org_idx, title_idx)
            if found:
                j, value = found
                org_val = value.strip()
                m = _TRAILING_NAME_RE.search(org_val)
                if m and "appr" not in meta and appr_present:
                    name = m.group(1).strip()
                    meta["appr"] = name
                    org_val = org_val[: -len(name)].strip()
                if org_val:
                    meta["org"] = org_val
                mark(org_idx)
                mark(j)
        if "appr" not in meta and appr_idx >= 0:
            found = self._value_of(grid, appr_idx, title_idx)
            if found:
                j, value = found
                if _NAME_RE.match(value.strip()):
                    meta["appr"] = value.strip()
                mark(appr_idx)
                mark(j)

        # Plain "Key: value" rows fill whatever is still missing.
        for idx, g in enumerate(grid):
            kv = self._key_value(g.text)
            if not kv:
                continue
            name, val = kv
            if not val or self.is_key_line(val):
                continue
            if name not in meta and self._valid(name, val):
                meta[name] = val
            mark(idx)

        meta.pop("page", None)
        metadata = HeaderMetadata(**meta)
        logger.debug("header metadata=%s title=%r", metadata.as_dict(), title)
        return HeaderParseResult(metadata=metadata, excluded_lines=frozenset(excluded), title=title)

    @staticmethod
    def _valid(name: str, val: str) -> bool:
        if name == "doc":
            return bool(_DOC_RE.match(val))
        if name == "eff":
            return bool(_DATE_RE.match(val))
        if name == "rev":
            return bool(_REV_RE.match(val))
        if name == "appr":
            return bool(_NAME_RE.match(val))
        return name in ("org", "src")


def parse_header_and_title(page: Optional[Page], cfg: Optional[ConvertConfig] = None) -> HeaderParseResult:
    return HeaderParser(cfg).parse(page)

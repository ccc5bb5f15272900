from __future__ import annotations

import re
from dataclasses import dataclass


_NOISE_STARTS_WITH: tuple[str, ...] = (
    "This document contains proprietary information",
    "Unauthorized use",  # start of the banner, even when broken across lines
    "Uncontrolled if printed",
    "Before using this document, the reader is responsible",
    "Copyright",
    "All rights reserved",
    "use, reproduction, or distribution",  # second half of the banner
    "CUI",
    "Controlled Unclassified",
    "Privacy Act",
    "Sensitive but unclassified",
)

_NOISE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^\s*Page\s*:\s*\d+\s*of\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"^CLG\-[A-Z\-]+\d+(\s*Page\s*\d+)?$", re.IGNORECASE),
    re.compile(r"^\s*Revision\s*:\s*[A-Za-z0-9]+\s*$", re.IGNORECASE),
    re.compile(r"\b(CUI|Controlled\s+Unclassified|Privacy\s+Act|Sensitive\s+but\s+unclassified)\b", re.IGNORECASE),
    re.compile(r"\bproprietary information\b", re.IGNORECASE),
    re.compile(r"\bUnauthorized\s+use\b", re.IGNORECASE),
    re.compile(r"\buse\s*,\s*reproduction\s*,\s*or\s*distribution\b", re.IGNORECASE),
    re.compile(r"\breproduction\s*,\s*or\s*distribution\b", re.IGNORECASE),
    re.compile(r"\buncontrolled if printed\b", re.IGNORECASE),
    re.compile(r"\bAll rights reserved\b", re.IGNORECASE),
    re.compile(r"^\s*use\s*,?\s*or\s*$", re.IGNORECASE),
    # "Page: 1 of 4" anywhere, e.g. "CLG-EN-PR-0175 Page: 2 of 4"
    re.compile(r"\bPage\s*:\s*\d+\s*of\s*\d+\b", re.IGNORECASE),
)

# (metadata field, label pattern) for the banner grid, in grid order.
_HEADER_KEYS: tuple[tuple[str, str], ...] = (
    ("doc", r"Document\s*No\.?"),
    ("eff", r"Effective\s*Date"),
    ("rev", r"Revision"),
    ("org", r"Accountable\s*Organization"),
    ("appr", r"Management\s*Approval"),
    ("src", r"Source"),
    ("page", r"Page"),
)


@dataclass(frozen=True)
class ConvertConfig:
    """
    Read-only heuristic configuration shared by every conversion.

    Thresholds are tuned for one SOP template family; treat them as defaults.
    """

    line_y_tolerance: float = 2.0
    repeat_line_removal_threshold: float = 0.6
    repeat_scan_lines: int = 4

    table_lookahead_lines: int = 8
    large_gap_threshold: float = 22.0
    column_anchor_merge_tolerance: float = 16.0
    max_table_columns: int = 3
    min_table_anchors: int = 3

    header_scan_lines: int = 50
    header_value_lookahead: int = 8
    banner_scan_lines: int = 15
    banner_window_lines: int = 3

    normalize_text: bool = True
    backend: str = "pymupdf"

    noise_starts_with: tuple[str, ...] = _NOISE_STARTS_WITH
    noise_patterns: tuple[re.Pattern, ...] = _NOISE_PATTERNS
    header_keys: tuple[tuple[str, str], ...] = _HEADER_KEYS

    banner_top: str = "Management System"
    banner_mid: str = "Standard Operating Procedure"

    process_section_number: str = "6"
    process_table_header_tokens: tuple[str, ...] = ("Step", "Responsibility", "Action")

    fallback_logical_name: str = "document"

    def __post_init__(self) -> None:
        if self.line_y_tolerance <= 0:
            raise ValueError("line_y_tolerance must be positive")
        if not (0.0 <= self.repeat_line_removal_threshold <= 1.0):
            raise ValueError("repeat_line_removal_threshold must be within [0, 1]")
        if self.table_lookahead_lines < 1:
            raise ValueError("table_lookahead_lines must be >= 1")
        if not (1 <= self.min_table_anchors <= self.max_table_columns):
            raise ValueError("min_table_anchors must be within [1, max_table_columns]")
        if self.banner_window_lines < 1:
            raise ValueError("banner_window_lines must be >= 1")
        if self.backend not in ("pymupdf", "pdfplumber"):
            raise ValueError(f"unknown PDF backend: {self.backend!r}")

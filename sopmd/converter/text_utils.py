from __future__ import annotations

import re
import unicodedata

LIGATURES = {
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬀ": "ff",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
}

_CANONICAL_PUNCT = {
    "“": "\"",   # left double quote
    "”": "\"",   # right double quote
    "‘": "'",    # left single quote
    "’": "'",    # right single quote
    "–": "-",    # en dash
    "—": "-",    # em dash
    "‐": "-",    # hyphen
    "‑": "-",    # non-breaking hyphen
}


def _build_mojibake_repl() -> dict[str, str]:
    """
    Replacements for punctuation whose UTF-8 bytes were decoded as cp1252/latin1,
    e.g. "â€“" for an en dash. Word exports of SOPs are full of these.
    """
    out: dict[str, str] = {}
    for ch, repl in _CANONICAL_PUNCT.items():
        for codec in ("cp1252", "latin1"):
            try:
                bad = ch.encode("utf-8").decode(codec)
            except UnicodeDecodeError:
                continue
            if bad and bad != ch:
                out[bad] = repl
    return out


_MOJIBAKE_REPL: dict[str, str] = _build_mojibake_repl()

_MD_ESCAPES = (("|", "\\|"), ("*", "\\*"), ("_", "\\_"))


def _fix_common_mojibake(s: str) -> str:
    if not s:
        return ""
    for k, v in _MOJIBAKE_REPL.items():
        if k in s:
            s = s.replace(k, v)
    return s


def normalize_text(s: str) -> str:
    """NFKC, ligatures, smart punctuation and collapsed inner whitespace."""
    if not s:
        return ""
    s = _fix_common_mojibake(s)
    s = unicodedata.normalize("NFKC", s)
    for k, v in LIGATURES.items():
        s = s.replace(k, v)
    for k, v in _CANONICAL_PUNCT.items():
        s = s.replace(k, v)
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def escape_md(s: str) -> str:
    s = s or ""
    for k, v in _MD_ESCAPES:
        s = s.replace(k, v)
    return s.strip()


def strip_trailing_colon(s: str) -> str:
    return re.sub(r"\s*:\s*$", "", s or "")

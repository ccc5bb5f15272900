from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Mapping, Optional

from .converter.config import ConvertConfig


@dataclass(frozen=True)
class Settings:
    log_level: str
    output_dir: Path
    convert: ConvertConfig


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    raw = environ.get(name)
    if raw is None:
        return None
    v = raw.strip()
    # Users often set env vars with quotes (e.g. cmd.exe: set SOPMD_BACKEND="pdfplumber").
    if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
        v = v[1:-1].strip()
    return v or None


def _parse(environ: Mapping[str, str], name: str, conv: Callable):
    v = _env(environ, name)
    if v is None:
        return None
    try:
        return conv(v)
    except ValueError as e:
        raise ValueError(f"invalid value for {name}: {v!r}") from e


# env var -> (ConvertConfig field, converter)
_CONVERT_ENV: dict[str, tuple[str, Callable]] = {
    "SOPMD_LINE_Y_TOLERANCE": ("line_y_tolerance", float),
    "SOPMD_REPEAT_THRESHOLD": ("repeat_line_removal_threshold", float),
    "SOPMD_TABLE_LOOKAHEAD": ("table_lookahead_lines", int),
    "SOPMD_LARGE_GAP": ("large_gap_threshold", float),
    "SOPMD_ANCHOR_MERGE_TOLERANCE": ("column_anchor_merge_tolerance", float),
    "SOPMD_BACKEND": ("backend", str.lower),
}


def load_convert_config(environ: Optional[Mapping[str, str]] = None, base: Optional[ConvertConfig] = None) -> ConvertConfig:
    environ = os.environ if environ is None else environ
    overrides = {}
    for name, (fld, conv) in _CONVERT_ENV.items():
        v = _parse(environ, name, conv)
        if v is not None:
            overrides[fld] = v
    base = base or ConvertConfig()
    return replace(base, **overrides) if overrides else base


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    environ = os.environ if environ is None else environ
    log_level = (_env(environ, "SOPMD_LOG_LEVEL") or "INFO").upper()
    output_dir = Path(_env(environ, "SOPMD_OUTPUT_DIR") or "output").expanduser().resolve()
    return Settings(
        log_level=log_level,
        output_dir=output_dir,
        convert=load_convert_config(environ),
    )

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Any, Optional

import fitz  # PyMuPDF

from .converter.config import ConvertConfig
from .converter.layout_analysis import build_page
from .converter.models import Page, Word
from .converter.text_utils import normalize_text

try:
    import pdfplumber
except ImportError:
    pdfplumber = None

logger = logging.getLogger(__name__)


class PdfExtractionError(RuntimeError):
    """The input could not be opened or decoded as a PDF."""


def _ensure_pdfplumber_module():
    global pdfplumber
    if pdfplumber is not None:
        return pdfplumber
    try:
        import pdfplumber as _pdfplumber
    except ImportError as e:
        raise ImportError("`pdfplumber` package is not available; install it or use the pymupdf backend.") from e
    pdfplumber = _pdfplumber
    return pdfplumber


def ensure_dir(p: Path) -> None:
    Path(p).mkdir(parents=True, exist_ok=True)


def logical_name_for(path) -> str:
    return Path(path).stem


def read_pdf_source(source: Any) -> tuple[bytes, Optional[str]]:
    """
    Bytes of a PDF given as a path, a bytes-like buffer or a binary stream,
    plus the logical name a path implies. A seekable stream is left at the
    position it had on entry.
    """
    if source is None:
        raise TypeError("a PDF path, bytes or binary stream is required")

    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise PdfExtractionError(f"cannot read {path}: {e}") from e
        return data, logical_name_for(path)

    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), None

    if hasattr(source, "read"):
        pos = None
        try:
            if source.seekable():
                pos = source.tell()
        except (AttributeError, OSError):
            pos = None
        data = source.read()
        if pos is not None:
            source.seek(pos)
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("PDF stream must be opened in binary mode")
        return bytes(data), None

    raise TypeError(f"unsupported PDF source: {type(source).__name__}")


def _make_word(text: str, left: float, right: float, y: float, cfg: ConvertConfig) -> Word:
    if cfg.normalize_text:
        text = normalize_text(text)
    return Word(text=text, left=float(left), right=float(right), y=float(y))


def _extract_pages_pymupdf(data: bytes, cfg: ConvertConfig) -> list[Page]:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise PdfExtractionError(f"cannot open PDF: {e}") from e

    with doc:
        if doc.needs_pass:
            raise PdfExtractionError("PDF is encrypted")
        if doc.page_count == 0:
            raise PdfExtractionError("PDF has no pages")
        pages: list[Page] = []
        for i in range(doc.page_count):
            try:
                page = doc.load_page(i)
                height = float(page.rect.height)
                # (x0, y0, x1, y1, text, block, line, word); fitz y grows downwards.
                words = [
                    _make_word(w[4], w[0], w[2], height - (w[1] + w[3]) / 2.0, cfg)
                    for w in page.get_text("words")
                ]
            except Exception as e:
                logger.warning("page %d: word extraction failed, skipped: %s", i + 1, e)
                continue
            pages.append(build_page(i + 1, height, words, cfg))
    return pages


def _extract_pages_pdfplumber(data: bytes, cfg: ConvertConfig) -> list[Page]:
    pdm = _ensure_pdfplumber_module()
    try:
        pdf = pdm.open(io.BytesIO(data))
    except Exception as e:
        raise PdfExtractionError(f"cannot open PDF: {e}") from e

    pages: list[Page] = []
    with pdf:
        try:
            page_list = list(pdf.pages)
        except Exception as e:
            raise PdfExtractionError(f"cannot read PDF pages: {e}") from e
        if not page_list:
            raise PdfExtractionError("PDF has no pages")
        for i, pg in enumerate(page_list):
            try:
                height = float(pg.height)
                words = [
                    _make_word(w["text"], w["x0"], w["x1"], height - (float(w["top"]) + float(w["bottom"])) / 2.0, cfg)
                    for w in pg.extract_words()
                ]
            except Exception as e:
                logger.warning("page %d: word extraction failed, skipped: %s", i + 1, e)
                continue
            pages.append(build_page(i + 1, height, words, cfg))
    return pages


def extract_pages(data: bytes, cfg: Optional[ConvertConfig] = None) -> list[Page]:
    """Per-page lines built from the PDF's word boxes."""
    cfg = cfg or ConvertConfig()
    if not data:
        raise PdfExtractionError("empty PDF input")
    if cfg.backend == "pdfplumber":
        return _extract_pages_pdfplumber(data, cfg)
    return _extract_pages_pymupdf(data, cfg)

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from ..pdf_tools import ensure_dir, extract_pages, read_pdf_source
from .block_classifier import BlockSegmenter
from .config import ConvertConfig
from .header_parser import HeaderParser
from .layout_analysis import clean_body_lines, detect_repeating_lines
from .models import HeaderParseResult, Page
from .post_processing import render_markdown

logger = logging.getLogger(__name__)


class PDFConverter:
    """
    SOP PDF -> Markdown.

    Stateless between calls: every conversion builds its own pages, lines and
    segmenter, so one instance may be shared across threads.
    """

    def __init__(self, cfg: Optional[ConvertConfig] = None):
        self.cfg = cfg or ConvertConfig()
        self.header_parser = HeaderParser(self.cfg)

    def convert(self, source: Any, logical_name: Optional[str] = None) -> str:
        """
        Convert a PDF given as a file path, bytes or binary stream.

        `logical_name` is only used as the title of last resort; for a path it
        defaults to the file stem.
        """
        data, implied_name = read_pdf_source(source)
        pages = extract_pages(data, self.cfg)
        name = logical_name or implied_name or self.cfg.fallback_logical_name
        return self.convert_pages(pages, name)

    def convert_pages(self, pages: list[Page], logical_name: Optional[str] = None) -> str:
        cfg = self.cfg
        repeated = detect_repeating_lines(pages, cfg)
        header: HeaderParseResult = self.header_parser.parse(pages[0] if pages else None)
        body = clean_body_lines(pages, repeated, header, cfg)
        blocks = BlockSegmenter(cfg).segment(body)

        title = next(
            (t for t in (header.title, header.metadata.doc, logical_name, cfg.fallback_logical_name) if t and t.strip()),
            "document",
        )
        logger.info(
            "converted %r: %d pages, %d repeating lines, %d blocks",
            title, len(pages), len(repeated), len(blocks),
        )
        return render_markdown(title, blocks)

    def convert_file(self, pdf_path, save_dir, overwrite: bool = True) -> Path:
        """Write `<stem>.md` for `pdf_path` into `save_dir` and return its path."""
        pdf_path = Path(pdf_path).resolve()
        save_dir = Path(save_dir).resolve()
        ensure_dir(save_dir)
        out_file = save_dir / f"{pdf_path.stem}.md"
        if out_file.exists() and not overwrite:
            logger.info("skipping %s (exists)", out_file)
            return out_file
        md = self.convert(pdf_path)
        out_file.write_text(md, encoding="utf-8")
        logger.info("saved %s", out_file)
        return out_file


def convert_pdf_to_markdown(source: Any, logical_name: Optional[str] = None, cfg: Optional[ConvertConfig] = None) -> str:
    return PDFConverter(cfg).convert(source, logical_name)

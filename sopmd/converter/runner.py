from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from ..config import load_settings
from ..pdf_tools import PdfExtractionError
from .pipeline import PDFConverter

logger = logging.getLogger("sopmd")


def _iter_pdfs(inputs: list[str], recursive: bool) -> list[Path]:
    out: list[Path] = []
    for raw in inputs:
        p = Path(raw)
        if p.is_dir():
            pattern = "**/*.pdf" if recursive else "*.pdf"
            out.extend(sorted(x for x in p.glob(pattern) if x.is_file()))
        else:
            out.append(p)
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert SOP PDFs to normalized Markdown")
    parser.add_argument("inputs", nargs="+", help="PDF files or directories of PDFs")
    parser.add_argument("--save_dir", "-o", default=None, help="Output directory (default: $SOPMD_OUTPUT_DIR or ./output)")
    parser.add_argument("--recursive", "-r", action="store_true", help="Recurse into input directories")
    parser.add_argument("--overwrite", action="store_true", help="Re-convert PDFs whose Markdown already exists")
    parser.add_argument("--backend", choices=("pymupdf", "pdfplumber"), default=None, help="Word extraction backend")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $SOPMD_LOG_LEVEL or INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = settings.convert
    if args.backend:
        cfg = replace(cfg, backend=args.backend)
    save_dir = Path(args.save_dir) if args.save_dir else settings.output_dir

    converter = PDFConverter(cfg)
    pdfs = _iter_pdfs(args.inputs, args.recursive)
    if not pdfs:
        logger.error("no PDF files found in %s", ", ".join(args.inputs))
        return 1

    failed = 0
    for pdf in pdfs:
        try:
            converter.convert_file(pdf, save_dir, overwrite=args.overwrite)
        except (PdfExtractionError, OSError) as e:
            failed += 1
            logger.error("%s\t%s", pdf.name, e)
    logger.info("done: %d converted, %d failed", len(pdfs) - failed, failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

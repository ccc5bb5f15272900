from .converter.config import ConvertConfig
from .converter.pipeline import PDFConverter, convert_pdf_to_markdown
from .pdf_tools import PdfExtractionError

__all__ = ["PDFConverter", "ConvertConfig", "PdfExtractionError", "convert_pdf_to_markdown"]

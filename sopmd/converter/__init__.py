from .config import ConvertConfig
from .models import HeaderMetadata, HeaderParseResult, Line, Page, Word

__all__ = ["ConvertConfig", "HeaderMetadata", "HeaderParseResult", "Line", "Page", "Word"]

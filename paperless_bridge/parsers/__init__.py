"""Document parsers."""

from .pdf_parser import PDFTextExtractor, is_pdf

__all__ = ["PDFTextExtractor", "is_pdf"]

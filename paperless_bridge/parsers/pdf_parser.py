"""PDF text extraction using PyMuPDF and pdfplumber."""

import asyncio
import time
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF
import pdfplumber

from ..core.errors import ExtractionError
from ..core.logging import get_logger

PDF_MAGIC = b"%PDF"

logger = get_logger(__name__)


def is_pdf(content: bytes) -> bool:
    """Check the PDF magic header."""
    return content[:len(PDF_MAGIC)] == PDF_MAGIC


class PDFTextExtractor:
    """Extracts plain text from a PDF file on disk.

    PyMuPDF is tried first; pdfplumber is the fallback when PyMuPDF fails or
    finds no text layer. Both engines are synchronous and run in a worker
    thread.
    """

    async def extract(self, file_path: Union[str, Path]) -> str:
        file_path = Path(file_path)
        start_time = time.time()

        text = await asyncio.to_thread(self._extract_sync, file_path)

        logger.info(
            "Extracted PDF text",
            file_path=str(file_path),
            text_length=len(text),
            parse_time=time.time() - start_time
        )
        return text

    def _extract_sync(self, file_path: Path) -> str:
        if not file_path.exists():
            raise ExtractionError(f"PDF not found: {file_path}")

        try:
            text = self._extract_with_pymupdf(file_path)
        except Exception as e:
            logger.warning("PyMuPDF extraction failed", file_path=str(file_path), error=str(e))
            text = ""

        if not text.strip():
            logger.info("No text from PyMuPDF, trying pdfplumber", file_path=str(file_path))
            try:
                text = self._extract_with_pdfplumber(file_path)
            except Exception as e:
                raise ExtractionError(
                    f"Failed to extract text from {file_path}: {e}"
                ) from e

        text = text.strip()
        if not text:
            raise ExtractionError(f"No text found in {file_path}")
        return text

    @staticmethod
    def _extract_with_pymupdf(file_path: Path) -> str:
        with fitz.open(str(file_path)) as doc:
            return "\n".join(page.get_text() for page in doc)

    @staticmethod
    def _extract_with_pdfplumber(file_path: Path) -> str:
        with pdfplumber.open(file_path) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return "\n".join(pages)

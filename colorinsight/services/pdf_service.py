"""
PDF text extraction backed by PyMuPDF.
"""

import fitz  # PyMuPDF

from colorinsight.errors import PDFExtractionError
from colorinsight.utils.constants import MAX_PDF_PAGES
from colorinsight.utils.logger import logger


class PDFService:
    """Service for reading text out of uploaded reports."""

    def __init__(self, max_pages: int = MAX_PDF_PAGES):
        self.max_pages = max_pages

    def extract_text(self, data: bytes) -> str:
        """
        Extract text from a PDF, one ``[Page N]`` block per page.

        Args:
            data: Raw PDF bytes

        Returns:
            Concatenated page text for at most ``max_pages`` pages

        Raises:
            PDFExtractionError: If the bytes are not a readable PDF
        """
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                page_count = min(doc.page_count, self.max_pages)
                logger.info(f"Extracting text from {page_count} of {doc.page_count} pages")

                full_text = ""
                for index in range(page_count):
                    page_text = " ".join(doc.load_page(index).get_text("text").split())
                    full_text += f"[Page {index + 1}] {page_text}\n"
                return full_text
        except Exception as e:
            logger.error(f"Error extracting PDF text: {e}")
            raise PDFExtractionError("Failed to parse PDF file. Please ensure it is a valid PDF.") from e

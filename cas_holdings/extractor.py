"""
PDF text extraction module for the holdings statement parser.

This module reads positioned words from PDF pages using pdfplumber and
hands them over as TextRun values, in content stream order, for layout
reconstruction.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import pdfplumber

from cas_holdings.models import InvalidStatementError, TextRun

logger = logging.getLogger(__name__)

PDFSource = Union[str, Path, bytes, BinaryIO]


@dataclass
class PageContent:
    """
    Represents extracted content from a single PDF page.

    Attributes:
        page_number: 1-indexed page number
        runs: Text runs in extraction order
    """
    page_number: int
    runs: List[TextRun] = field(default_factory=list)


@dataclass
class ExtractedDocument:
    """
    Represents the complete extracted content from a PDF document.

    Attributes:
        pages: List of page contents
        total_pages: Total number of pages in the document
        source_path: Path to the source PDF file, if read from disk
    """
    pages: List[PageContent] = field(default_factory=list)
    total_pages: int = 0
    source_path: Optional[str] = None

    def get_page_runs(self) -> List[List[TextRun]]:
        """
        Get the runs of every page.

        Returns:
            One list of runs per page, pages in document order.
        """
        return [page.runs for page in self.pages]


class PDFExtractor:
    """
    Extracts positioned text runs from statement PDFs.

    Words are read with pdfplumber in text-flow order. A word is flagged as
    ending a line when the flow moves down and back to the left after it,
    and on the last word of a page.
    """

    def __init__(self, password: Optional[str] = None):
        """
        Initialize the PDF extractor.

        Args:
            password: Optional password for encrypted PDFs.
        """
        self.password = password

    def extract(self, source: PDFSource) -> ExtractedDocument:
        """
        Extract text runs from a PDF.

        Args:
            source: Path to the PDF file, its raw bytes or a binary stream.

        Returns:
            ExtractedDocument containing the runs of every page.

        Raises:
            InvalidStatementError: If no source was supplied.
            FileNotFoundError: If the PDF file does not exist.
            ValueError: If the file is not a PDF.
        """
        if source is None or (isinstance(source, bytes) and not source):
            raise InvalidStatementError()

        source_path = None
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"PDF file not found: {path}")
            if not path.suffix.lower() == ".pdf":
                raise ValueError(f"File is not a PDF: {path}")
            source_path = str(path)
            logger.info(f"Extracting text from PDF: {path}")
        elif isinstance(source, bytes):
            source = io.BytesIO(source)

        document = ExtractedDocument(source_path=source_path)

        try:
            with pdfplumber.open(source, password=self.password) as pdf:
                document.total_pages = len(pdf.pages)
                logger.info(f"PDF has {document.total_pages} pages")

                for page_num, page in enumerate(pdf.pages, start=1):
                    page_content = PageContent(
                        page_number=page_num, runs=self._extract_runs(page)
                    )
                    document.pages.append(page_content)
                    logger.debug(
                        f"Page {page_num}: extracted {len(page_content.runs)} runs"
                    )

        except Exception as e:
            logger.error(f"Failed to extract PDF: {e}")
            raise

        return document

    def _extract_runs(self, page: pdfplumber.page.Page) -> List[TextRun]:
        """
        Read the words of a page as text runs.

        Args:
            page: pdfplumber page object.

        Returns:
            Text runs in text-flow order.
        """
        words = page.extract_words(
            x_tolerance=1.5,
            y_tolerance=2,
            keep_blank_chars=True,
            use_text_flow=True,
        )

        if not words:
            logger.warning(f"No text extracted from page {page.page_number}")
            return []

        runs = []
        for index, word in enumerate(words):
            next_word = words[index + 1] if index + 1 < len(words) else None
            end_of_line = next_word is None or (
                next_word["x0"] < word["x0"] and next_word["top"] > word["top"]
            )
            runs.append(
                TextRun(
                    text=word["text"],
                    x=float(word["x0"]),
                    y=float(word["bottom"]),
                    width=float(word["x1"] - word["x0"]),
                    height=float(word["bottom"] - word["top"]),
                    end_of_line=end_of_line,
                )
            )
        return runs


def extract_runs_from_pdf(
    source: PDFSource,
    password: Optional[str] = None,
) -> ExtractedDocument:
    """
    Convenience function to extract text runs from a PDF.

    Args:
        source: Path to the PDF file, its raw bytes or a binary stream.
        password: Optional password for encrypted PDFs.

    Returns:
        ExtractedDocument containing the runs of every page.
    """
    extractor = PDFExtractor(password=password)
    return extractor.extract(source)

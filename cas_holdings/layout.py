"""
Layout reconstruction for positioned page text.

PDF content streams deliver text as independently positioned runs with no
notion of rows or columns. This module rebuilds newline-delimited lines and
tab-delimited cells from run geometry alone.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from cas_holdings.models import TextRun

logger = logging.getLogger(__name__)

# Tuned for the font size and column spacing of the supported statements.
LINE_THRESHOLD = 4.6
CELL_THRESHOLD = 7.0
CELL_SEPARATOR = "\t"


class LayoutReconstructor:
    """
    Turns runs of one page into lines and cells.

    A single pass over the runs in extraction order keeps the trailing edge
    and baseline of the previous run and the tallest glyph seen on the
    current row:

    - a vertical jump larger than ``line_threshold`` (and larger than the
      row's glyph height plus one) starts a new line,
    - on the same line, a horizontal gap larger than ``cell_threshold``
      starts a new cell.
    """

    def __init__(
        self,
        line_threshold: float = LINE_THRESHOLD,
        cell_threshold: float = CELL_THRESHOLD,
        cell_separator: str = CELL_SEPARATOR,
    ):
        """
        Initialize the reconstructor.

        Args:
            line_threshold: Vertical distance above which runs are on different lines.
            cell_threshold: Horizontal gap above which same-line runs are different cells.
            cell_separator: Character inserted between cells.
        """
        self.line_threshold = line_threshold
        self.cell_threshold = cell_threshold
        self.cell_separator = cell_separator

    def reconstruct(self, runs: Iterable[TextRun]) -> str:
        """
        Reconstruct the text of a single page.

        Args:
            runs: Text runs of the page in extraction order.

        Returns:
            Page text with lines joined by newlines and cells by the separator.
        """
        parts: List[str] = []
        last_x: Optional[float] = None
        last_y: Optional[float] = None
        line_height = 0.0

        for run in runs:
            if run.text is None:
                continue

            text = run.text
            line_broken = False

            if last_y is not None:
                y_delta = abs(last_y - run.y)

                if y_delta > self.line_threshold:
                    run_breaks_line = text.startswith("\n") or (
                        not text.strip() and run.end_of_line
                    )
                    if parts and not parts[-1].endswith("\n") and not run_breaks_line:
                        # Baseline jitter within one visual row stays on the row
                        if y_delta - 1 > line_height:
                            parts.append("\n")
                            line_broken = True
                elif last_x is not None and abs(run.x - last_x) > self.cell_threshold:
                    text = f"{self.cell_separator}{text}"

            parts.append(text)

            if run.end_of_line:
                parts.append("\n")

            # The run after an inferred break does not seed the new row
            if line_broken or run.end_of_line or text.endswith("\n"):
                line_height = 0.0
            else:
                line_height = max(line_height, run.height)

            last_x = run.x + run.width
            last_y = run.y

        return "".join(parts)

    def reconstruct_pages(self, pages: Iterable[Sequence[TextRun]]) -> str:
        """
        Reconstruct a whole document.

        Args:
            pages: Runs of each page, pages in document order.

        Returns:
            Text of all pages joined by newlines.
        """
        page_texts = [self.reconstruct(runs) for runs in pages]
        logger.debug(f"Reconstructed {len(page_texts)} pages")
        return "\n".join(page_texts)


def reconstruct_text(pages: Iterable[Sequence[TextRun]]) -> str:
    """
    Convenience function to reconstruct document text with default thresholds.

    Args:
        pages: Runs of each page, pages in document order.

    Returns:
        Reconstructed document text.
    """
    return LayoutReconstructor().reconstruct_pages(pages)

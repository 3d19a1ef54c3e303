"""
Shared accumulation loop for statement grammars.

A grammar walks the reconstructed lines once, filling a single draft
holding. Whenever the draft becomes complete it is committed into the
holdings map under its ISIN and a fresh draft is started. Drafts still
incomplete when the lines run out are dropped.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from cas_holdings.classifier import LineClassifier
from cas_holdings.models import DraftState, Holding

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Holding)


class StatementParser(ABC, Generic[H]):
    """
    Base class for single-pass, single-draft statement grammars.

    Subclasses provide the draft type and ``_consume_line``; the base class
    owns the draft lifecycle and the last-write-wins holdings map.
    """

    def __init__(self, classifier: Optional[LineClassifier] = None):
        """
        Initialize the parser.

        Args:
            classifier: Line classifier; defaults to the standard patterns.
        """
        self.classifier = classifier or LineClassifier()
        self._reset()

    @abstractmethod
    def _new_draft(self) -> H:
        """Empty draft for the grammar's holding type."""

    @abstractmethod
    def _consume_line(self, line: str) -> None:
        """Apply one non-ignored, trimmed line to the draft."""

    def _select_lines(self, lines: List[str]) -> List[str]:
        """Lines the grammar scans; all of them unless overridden."""
        return lines

    def _reset(self) -> None:
        self.holdings: Dict[str, H] = {}
        self.draft: H = self._new_draft()

    def parse(self, lines: Iterable[str]) -> Dict[str, H]:
        """
        Parse holdings from reconstructed lines.

        Args:
            lines: Reconstructed lines of the whole document.

        Returns:
            Committed holdings keyed by ISIN.
        """
        self._reset()
        selected = self._select_lines(list(lines))

        logger.info(f"Scanning {len(selected)} lines")

        for line in selected:
            trimmed = line.strip()
            if self.classifier.is_ignored(trimmed):
                logger.debug(f"Ignoring boilerplate line: {trimmed[:60]}")
                continue

            self._consume_line(trimmed)

            if self.draft.state is DraftState.READY_TO_COMMIT:
                self._commit()

        if self.draft.identifier:
            logger.debug(f"Discarding incomplete holding for {self.draft.identifier}")

        logger.info(f"Parsed {len(self.holdings)} holdings")
        return self.holdings

    def _commit(self) -> None:
        isin = self.draft.identifier
        if isin in self.holdings:
            logger.debug(f"Replacing earlier holding for {isin}")
        else:
            logger.debug(f"Committed holding for {isin}")
        self.holdings[isin] = self.draft
        self.draft = self._new_draft()

"""
Main entry points for the holdings statement parser.

This module orchestrates the parsing process from PDF extraction through
layout reconstruction, grammar parsing and validation to JSON export.
"""

import json
import logging
from typing import Iterable, Optional, Sequence, Union

from cas_holdings.brokerage_parser import BrokerageStatementParser
from cas_holdings.consolidated_parser import ConsolidatedStatementParser
from cas_holdings.extractor import PDFExtractor, PDFSource
from cas_holdings.layout import LayoutReconstructor
from cas_holdings.models import (
    HoldingsStatement,
    InvalidStatementError,
    StatementGrammar,
    TextRun,
)
from cas_holdings.validator import HoldingsValidator

logger = logging.getLogger(__name__)

GrammarName = Union[str, StatementGrammar]


def _resolve_grammar(grammar: GrammarName) -> StatementGrammar:
    if isinstance(grammar, StatementGrammar):
        return grammar
    try:
        return StatementGrammar(grammar.lower())
    except (AttributeError, ValueError):
        raise ValueError(f"Unknown statement grammar: {grammar!r}") from None


class HoldingsParser:
    """
    Main parser class for holdings statements.

    This class orchestrates the complete parsing pipeline:
    1. Extract text runs from the PDF
    2. Reconstruct lines and cells from run geometry
    3. Parse holdings with the statement grammar
    4. Reconcile and validate the results
    """

    def __init__(
        self,
        grammar: GrammarName = StatementGrammar.CONSOLIDATED,
        password: Optional[str] = None,
        reconstructor: Optional[LayoutReconstructor] = None,
        validator: Optional[HoldingsValidator] = None,
    ):
        """
        Initialize the holdings parser.

        Args:
            grammar: Statement grammar, "consolidated" or "brokerage".
            password: Optional password for encrypted PDFs.
            reconstructor: Layout reconstructor; defaults to standard thresholds.
            validator: Holdings validator; defaults to standard tolerances.
        """
        self.grammar = _resolve_grammar(grammar)
        self.extractor = PDFExtractor(password=password)
        self.reconstructor = reconstructor or LayoutReconstructor()
        self.validator = validator or HoldingsValidator()

    def parse(self, source: PDFSource) -> HoldingsStatement:
        """
        Parse a statement PDF.

        Args:
            source: Path to the PDF file, its raw bytes or a binary stream.

        Returns:
            HoldingsStatement with all parsed data.

        Raises:
            InvalidStatementError: If no source was given or no holdings were found.
            FileNotFoundError: If the PDF file doesn't exist.
        """
        if source is None:
            raise InvalidStatementError()

        logger.info(f"Starting {self.grammar.value} statement parsing")

        document = self.extractor.extract(source)
        statement = self.parse_runs(document.get_page_runs())
        statement.source_file = document.source_path
        return statement

    def parse_runs(self, pages: Sequence[Sequence[TextRun]]) -> HoldingsStatement:
        """
        Parse a statement from the text runs of its pages.

        Args:
            pages: Runs of each page, pages in document order.

        Returns:
            HoldingsStatement with all parsed data.
        """
        if pages is None:
            raise InvalidStatementError()

        text = self.reconstructor.reconstruct_pages(pages)
        statement = self.parse_text(text)
        statement.page_count = len(pages)
        return statement

    def parse_text(self, text: str) -> HoldingsStatement:
        """
        Parse a statement from reconstructed text.

        Args:
            text: Newline-delimited, tab-celled statement text.

        Returns:
            HoldingsStatement with all parsed data.

        Raises:
            InvalidStatementError: If no holdings were found.
        """
        if text is None:
            raise InvalidStatementError()

        lines = text.split("\n")
        logger.info(f"Parsing {len(lines)} lines")

        statement = HoldingsStatement(grammar=self.grammar)

        if self.grammar is StatementGrammar.BROKERAGE:
            parser = BrokerageStatementParser()
            statement.holdings = parser.parse(lines)
            statement.holding_date = parser.holding_date
            statement.reported_total = parser.reported_total
        else:
            statement.holdings = ConsolidatedStatementParser().parse(lines)

        if not statement.holdings:
            logger.error("No holdings found in statement")
            raise InvalidStatementError()

        statement.validation = self.validator.validate(statement)

        logger.info(
            f"Parsing complete: {len(statement.holdings)} holdings, "
            f"valid={statement.validation.is_valid}"
        )

        return statement


def parse_statement_pdf(
    source: PDFSource,
    grammar: GrammarName = StatementGrammar.CONSOLIDATED,
    password: Optional[str] = None,
) -> HoldingsStatement:
    """
    Parse a statement PDF.

    This is the main entry point for programmatic use.

    Args:
        source: Path to the PDF file, its raw bytes or a binary stream.
        grammar: Statement grammar, "consolidated" or "brokerage".
        password: Optional password for encrypted PDFs.

    Returns:
        HoldingsStatement with all parsed data.
    """
    parser = HoldingsParser(grammar=grammar, password=password)
    return parser.parse(source)


def parse_statement_runs(
    pages: Sequence[Sequence[TextRun]],
    grammar: GrammarName = StatementGrammar.CONSOLIDATED,
) -> HoldingsStatement:
    """Parse a statement from already extracted text runs."""
    return HoldingsParser(grammar=grammar).parse_runs(pages)


def parse_statement_text(
    text: Union[str, Iterable[str]],
    grammar: GrammarName = StatementGrammar.CONSOLIDATED,
) -> HoldingsStatement:
    """Parse a statement from reconstructed text or its lines."""
    if text is None:
        raise InvalidStatementError()
    if not isinstance(text, str):
        text = "\n".join(text)
    return HoldingsParser(grammar=grammar).parse_text(text)


def export_to_json(statement: HoldingsStatement) -> str:
    """
    Export a parsed statement to JSON.

    Args:
        statement: Parsed statement.

    Returns:
        JSON string representation.
    """
    return json.dumps(statement.to_dict(), indent=2, ensure_ascii=False)

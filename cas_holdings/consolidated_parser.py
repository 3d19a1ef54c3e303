"""
Holdings parser for consolidated account statements.

Each holding spans two lines, in either order:

- a folio line, e.g. ``12345678/001  1,234.56 ...``, carrying the folio
  number and the market value,
- an ISIN line, e.g. ``100 01-Jan-2024 10.50 ... INF1A2B3C4D 999.00``,
  carrying units, NAV date, NAV, the ISIN and the cost value.
"""

import logging
from typing import Dict, List

from cas_holdings.classifier import LineKind
from cas_holdings.columns import (
    ColumnRole,
    extract_columns,
    to_amount,
    to_folio,
    to_leading_amount,
    to_nav_date,
    tokenize,
)
from cas_holdings.models import ConsolidatedHolding
from cas_holdings.statement_parser import StatementParser

logger = logging.getLogger(__name__)

FOLIO_LINE_COLUMNS = (
    ColumnRole("folio", 0, to_folio, default=""),
    ColumnRole("market_value", 1, to_leading_amount),
)

ISIN_LINE_COLUMNS = (
    ColumnRole("units", 0, to_amount),
    ColumnRole("nav_date", 1, to_nav_date, default=""),
    ColumnRole("nav", 2, to_amount),
    ColumnRole("cost_value", 4, to_amount),
)


class ConsolidatedStatementParser(StatementParser[ConsolidatedHolding]):
    """Parser for the holdings summary of a consolidated account statement."""

    def _new_draft(self) -> ConsolidatedHolding:
        return ConsolidatedHolding()

    def _consume_line(self, line: str) -> None:
        classified = self.classifier.classify(line)

        if classified.kind is LineKind.KEY:
            self._consume_folio_line(classified.text)
        elif classified.kind is LineKind.IDENTIFIER:
            self._consume_isin_line(classified.text, classified.match.group(0))

    def _consume_folio_line(self, line: str) -> None:
        tokens = tokenize(line)
        if len(tokens) < 2:
            return

        fields = extract_columns(tokens, FOLIO_LINE_COLUMNS)
        if not fields["market_value"]:
            logger.debug(f"No market value on folio line: {line[:60]}")
            return

        self.draft.folio = fields["folio"]
        self.draft.market_value = fields["market_value"]

    def _consume_isin_line(self, line: str, isin: str) -> None:
        fields = extract_columns(tokenize(line), ISIN_LINE_COLUMNS)

        self.draft.units = fields["units"]
        self.draft.nav_date = fields["nav_date"]
        self.draft.nav = fields["nav"]
        self.draft.isin = isin
        self.draft.cost_value = fields["cost_value"]


def parse_consolidated_holdings(lines: List[str]) -> Dict[str, ConsolidatedHolding]:
    """
    Convenience function to parse consolidated statement holdings.

    Args:
        lines: Reconstructed lines of the statement.

    Returns:
        Committed holdings keyed by ISIN.
    """
    parser = ConsolidatedStatementParser()
    return parser.parse(lines)

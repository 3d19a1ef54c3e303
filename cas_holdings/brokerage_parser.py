"""
Holdings parser for brokerage transaction and holding statements.

Only the part of the document from the "Holdings Balance" heading onwards
is scanned. The ISIN and the numeric columns of a holding are not always on
the same line, so every line refreshes units, rate and value from its own
tokens while the last seen ISIN is carried forward until all four fields
line up.
"""

import logging
from decimal import Decimal
from typing import Dict, List

from cas_holdings.classifier import (
    BROKERAGE_ISIN_PATTERN,
    HOLDING_DATE_PATTERN,
    TOTAL_AMOUNT_PATTERN,
    find_holdings_start,
)
from cas_holdings.columns import (
    ColumnRole,
    extract_columns,
    to_amount,
    to_decimal,
    to_holding_date,
    tokenize,
)
from cas_holdings.models import BrokerageHolding
from cas_holdings.statement_parser import StatementParser

logger = logging.getLogger(__name__)

HOLDING_COLUMNS = (
    ColumnRole("units", None, to_decimal),
    ColumnRole("rate", -2, to_decimal),
    ColumnRole("value", -1, to_decimal),
)


class BrokerageStatementParser(StatementParser[BrokerageHolding]):
    """
    Parser for the holdings balance section of a brokerage statement.

    Besides the holdings, a parse records the statement-level holding date
    and the reported total used for reconciliation.
    """

    def _reset(self) -> None:
        super()._reset()
        self.holding_date = ""
        self.reported_total = Decimal("0")

    def _new_draft(self) -> BrokerageHolding:
        return BrokerageHolding()

    def _select_lines(self, lines: List[str]) -> List[str]:
        start = find_holdings_start(lines)
        if start == -1:
            logger.warning("No holdings balance heading found")
        return lines[start:]

    def _consume_line(self, line: str) -> None:
        isin_match = BROKERAGE_ISIN_PATTERN.match(line)
        date_match = HOLDING_DATE_PATTERN.match(line)
        total_match = TOTAL_AMOUNT_PATTERN.match(line)

        if date_match:
            self.holding_date = to_holding_date(date_match.group(0)) or ""

        if total_match:
            self.reported_total = to_amount(total_match.group(1)) or Decimal("0")

        if isin_match:
            self.draft.isin = isin_match.group(0)

        fields = extract_columns(tokenize(line), HOLDING_COLUMNS)
        self.draft.units = fields["units"]
        self.draft.rate = fields["rate"]
        self.draft.value = fields["value"]


def parse_brokerage_holdings(lines: List[str]) -> Dict[str, BrokerageHolding]:
    """
    Convenience function to parse brokerage statement holdings.

    Args:
        lines: Reconstructed lines of the statement.

    Returns:
        Committed holdings keyed by ISIN.
    """
    parser = BrokerageStatementParser()
    return parser.parse(lines)

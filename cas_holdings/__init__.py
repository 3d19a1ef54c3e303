"""
Holdings statement parser.

Extracts mutual fund and brokerage holdings from consolidated account
statement and brokerage holding statement PDFs by rebuilding their table
layout from positioned text.
"""

from cas_holdings.models import (
    BrokerageHolding,
    ConsolidatedHolding,
    HoldingsStatement,
    InvalidStatementError,
    StatementGrammar,
    TextRun,
    ValidationResult,
)
from cas_holdings.main import (
    export_to_json,
    parse_statement_pdf,
    parse_statement_runs,
    parse_statement_text,
)

__version__ = "1.0.0"
__all__ = [
    "BrokerageHolding",
    "ConsolidatedHolding",
    "HoldingsStatement",
    "InvalidStatementError",
    "StatementGrammar",
    "TextRun",
    "ValidationResult",
    "export_to_json",
    "parse_statement_pdf",
    "parse_statement_runs",
    "parse_statement_text",
]

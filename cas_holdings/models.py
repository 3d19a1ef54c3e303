"""
Data models for the holdings statement parser.

This module defines the core data structures using dataclasses for:
- Positioned text runs handed over by the PDF extraction layer
- Draft and committed holding records for both statement grammars
- Validation results and the parsed statement container
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import Dict, List, Optional, Union

INVALID_FILE_ERROR_MESSAGE = "You seem to have uploaded an invalid file. Please try again."


class InvalidStatementError(ValueError):
    """
    Raised when no document was supplied or no holdings could be parsed.

    Both causes surface with the same user-facing message.
    """

    def __init__(self, message: str = INVALID_FILE_ERROR_MESSAGE):
        super().__init__(message)


class StatementGrammar(Enum):
    """Statement layouts the parser understands."""
    CONSOLIDATED = "consolidated"
    BROKERAGE = "brokerage"


class DraftState(Enum):
    """
    Occupancy state of the live draft record.

    For the consolidated grammar the key is the folio / market value line,
    for the brokerage grammar it is the units, rate and value triple.
    """
    AWAITING_KEY = auto()
    AWAITING_IDENTIFIER = auto()
    READY_TO_COMMIT = auto()


@dataclass(frozen=True)
class TextRun:
    """
    One positioned fragment of page text.

    Attributes:
        text: Text payload; None for runs without text (e.g. marked content)
        x: Left edge of the fragment in a top-left origin page space
        y: Baseline of the fragment in the same space
        width: Horizontal extent of the fragment
        height: Glyph height of the fragment
        end_of_line: Whether the extraction layer flagged a line end after it
    """
    text: Optional[str]
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    end_of_line: bool = False


@dataclass
class ConsolidatedHolding:
    """
    A mutual fund holding from a consolidated account statement.

    Attributes:
        folio: Folio number (the part before "/")
        isin: International Securities Identification Number
        nav_date: Valuation date as YYYY-MM-DD, empty when unknown
        nav: Net Asset Value per unit
        units: Number of units held
        cost_value: Total cost of the holding
        market_value: Market value on the valuation date
    """
    folio: str = ""
    isin: str = ""
    nav_date: str = ""
    nav: Decimal = Decimal("0")
    units: Decimal = Decimal("0")
    cost_value: Decimal = Decimal("0")
    market_value: Decimal = Decimal("0")

    @property
    def identifier(self) -> str:
        return self.isin

    @property
    def state(self) -> DraftState:
        if self.isin and self.market_value:
            return DraftState.READY_TO_COMMIT
        if self.market_value:
            return DraftState.AWAITING_IDENTIFIER
        return DraftState.AWAITING_KEY


@dataclass
class BrokerageHolding:
    """
    A holding row from a brokerage transaction and holding statement.

    Attributes:
        isin: International Securities Identification Number
        rate: Closing price per unit
        units: Number of units held
        value: Holding value reported on the row
    """
    isin: str = ""
    rate: Decimal = Decimal("0")
    units: Decimal = Decimal("0")
    value: Decimal = Decimal("0")

    @property
    def identifier(self) -> str:
        return self.isin

    @property
    def state(self) -> DraftState:
        has_figures = bool(self.rate and self.units and self.value)
        if self.isin and has_figures:
            return DraftState.READY_TO_COMMIT
        if has_figures:
            return DraftState.AWAITING_IDENTIFIER
        return DraftState.AWAITING_KEY


Holding = Union[ConsolidatedHolding, BrokerageHolding]


@dataclass
class ValidationResult:
    """
    Result of validation checks on parsed holdings.

    Attributes:
        is_valid: True if all critical validations pass
        errors: List of critical errors (reconciliation mismatch)
        warnings: List of non-critical issues that should be reviewed
    """
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add a critical error and mark result as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a non-critical warning."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.is_valid:
            self.is_valid = False


@dataclass
class HoldingsStatement:
    """
    Parsed holdings of one statement document.

    Attributes:
        grammar: Statement layout the holdings were parsed with
        holdings: Committed holdings keyed by ISIN, in first-seen order
        holding_date: Statement-level holding date (brokerage), YYYY-MM-DD
        reported_total: Total reported by the statement (brokerage)
        validation: Results of reconciliation and sanity checks
        source_file: Path of the source PDF, when known
        page_count: Number of pages the text was reconstructed from
    """
    grammar: StatementGrammar
    holdings: Dict[str, Holding] = field(default_factory=dict)
    holding_date: str = ""
    reported_total: Decimal = Decimal("0")
    validation: ValidationResult = field(default_factory=ValidationResult)
    source_file: Optional[str] = None
    page_count: int = 0

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    def get_holding(self, isin: str) -> Optional[Holding]:
        """Get the committed holding for an ISIN, if any."""
        return self.holdings.get(isin)

    def to_dict(self) -> dict:
        """
        Convert the statement to a dictionary for JSON serialization.

        Returns:
            Dictionary representation with Decimals rendered as strings.
        """
        holdings = []
        for holding in self.holdings.values():
            holdings.append(
                {
                    key: str(value) if isinstance(value, Decimal) else value
                    for key, value in asdict(holding).items()
                }
            )

        data = {
            "grammar": self.grammar.value,
            "holdings": holdings,
            "validation": {
                "is_valid": self.validation.is_valid,
                "errors": self.validation.errors,
                "warnings": self.validation.warnings,
            },
            "source_file": self.source_file,
            "page_count": self.page_count,
        }
        if self.grammar is StatementGrammar.BROKERAGE:
            data["holding_date"] = self.holding_date or None
            data["reported_total"] = str(self.reported_total)
        return data

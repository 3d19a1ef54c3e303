"""
Column roles and token parsing for whitespace-split statement lines.

Each grammar declares which whitespace token feeds which holding field.
Token converters return None for anything they cannot read, which the
extraction step replaces with the field default.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Sequence

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

LEADING_AMOUNT_PATTERN = re.compile(r"\d+(\.\d{2})?")

ZERO = Decimal("0")


def to_decimal(token: str) -> Optional[Decimal]:
    """
    Parse a token as a finite decimal number.

    Args:
        token: Raw token.

    Returns:
        Decimal value, or None if the token is not a finite number.
    """
    # Digit-grouping underscores are not part of statement numbers
    if "_" in token:
        return None
    try:
        value = Decimal(token.strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def to_amount(token: str) -> Optional[Decimal]:
    """Parse a number written with thousands separators, e.g. "1,234.56"."""
    return to_decimal(token.replace(",", ""))


def to_leading_amount(token: str) -> Optional[Decimal]:
    """
    Parse the first integer or two-decimal number in a token.

    Anything after the number is dropped, so "1,234.567Cr" reads as 1234.56.
    """
    match = LEADING_AMOUNT_PATTERN.search(token.replace(",", ""))
    if not match:
        return None
    return to_decimal(match.group(0))


def to_folio(token: str) -> Optional[str]:
    """Folio number without the "/" suffix, e.g. "12345678/001" -> "12345678"."""
    folio = token.split("/")[0].strip()
    return folio or None


def to_nav_date(token: str) -> Optional[str]:
    """
    Parse a NAV date such as "01-Jan-2024" into YYYY-MM-DD.

    Args:
        token: Raw date token.

    Returns:
        ISO date string, or None if the token is not a date.
    """
    try:
        return date_parser.parse(token).date().isoformat()
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable NAV date {token!r}: {e}")
        return None


def to_holding_date(token: str) -> Optional[str]:
    """Parse a DD-MM-YYYY date into YYYY-MM-DD."""
    try:
        return datetime.strptime(token, "%d-%m-%Y").date().isoformat()
    except ValueError:
        return None


@dataclass(frozen=True)
class ColumnRole:
    """
    Binds one whitespace token of a line to a holding field.

    Attributes:
        field: Name of the holding field
        index: Token position (negative counts from the end); None selects
            the first token the converter accepts
        convert: Token converter returning None on failure
        default: Value used when the token is missing or unreadable
    """
    field: str
    index: Optional[int]
    convert: Callable[[str], Any]
    default: Any = ZERO

    def extract(self, tokens: Sequence[str]) -> Any:
        """Read this role's field from a tokenized line."""
        if self.index is None:
            for token in tokens:
                value = self.convert(token)
                if value is not None:
                    return value
            return self.default

        if not -len(tokens) <= self.index < len(tokens):
            return self.default

        value = self.convert(tokens[self.index])
        return self.default if value is None else value


def extract_columns(tokens: Sequence[str], roles: Sequence[ColumnRole]) -> Dict[str, Any]:
    """
    Extract all fields of a column-role table from a tokenized line.

    Args:
        tokens: Whitespace tokens of the line.
        roles: Column roles of the grammar.

    Returns:
        Mapping of field name to extracted value.
    """
    return {role.field: role.extract(tokens) for role in roles}


def tokenize(line: str) -> List[str]:
    """Split a line on any whitespace, cell separators included."""
    return line.split()

"""
Validation module for parsed holdings.

Reconciles brokerage holdings against the total reported by the statement
and flags holdings whose figures look inconsistent.
"""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from cas_holdings.models import (
    BrokerageHolding,
    ConsolidatedHolding,
    Holding,
    HoldingsStatement,
    StatementGrammar,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# Validation constants
RECONCILIATION_TOLERANCE = Decimal("0.05")  # Absolute tolerance on the statement total
VALUE_TOLERANCE = Decimal("0.01")  # 1% tolerance for units x price checks
ISIN_PATTERN = re.compile(r"^IN[A-Z0-9]{10}$")
CENTS = Decimal("0.01")


def holdings_total(holdings: Iterable[BrokerageHolding]) -> Decimal:
    """
    Sum holding values, rounded to two decimal places.

    Args:
        holdings: Committed brokerage holdings.

    Returns:
        Rounded total value.
    """
    total = sum((holding.value for holding in holdings), Decimal("0"))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_holdings_valid(
    holdings: Mapping[str, BrokerageHolding],
    total_amount: Decimal,
    tolerance: Decimal = RECONCILIATION_TOLERANCE,
) -> bool:
    """
    Check that the holdings add up to the reported total.

    Args:
        holdings: Committed holdings keyed by ISIN.
        total_amount: Total reported by the statement.
        tolerance: Largest accepted absolute difference.

    Returns:
        True if the difference is within tolerance, False otherwise.
    """
    return abs(Decimal(total_amount) - holdings_total(holdings.values())) <= tolerance


class HoldingsValidator:
    """
    Validator for parsed holdings statements.

    Implements:
    - Reconciliation of brokerage holdings with the reported total
    - Format validation of ISINs
    - Value calculations (units x price ~ value), as warnings only
    """

    def __init__(
        self,
        reconciliation_tolerance: Decimal = RECONCILIATION_TOLERANCE,
        value_tolerance: Decimal = VALUE_TOLERANCE,
    ):
        """
        Initialize the validator.

        Args:
            reconciliation_tolerance: Absolute tolerance for the statement total.
            value_tolerance: Relative tolerance for value calculations (0.01 = 1%).
        """
        self.reconciliation_tolerance = reconciliation_tolerance
        self.value_tolerance = value_tolerance

    def validate(self, statement: HoldingsStatement) -> ValidationResult:
        """
        Validate a parsed statement.

        Args:
            statement: Parsed statement to validate.

        Returns:
            ValidationResult with errors and warnings.
        """
        result = ValidationResult()

        for holding in statement.holdings.values():
            result.merge(self.validate_holding(holding))

        if statement.grammar is StatementGrammar.BROKERAGE:
            result.merge(
                self.reconcile(statement.holdings, statement.reported_total)
            )

        logger.info(
            f"Validation complete: valid={result.is_valid}, "
            f"errors={len(result.errors)}, warnings={len(result.warnings)}"
        )

        return result

    def reconcile(
        self, holdings: Mapping[str, BrokerageHolding], total_amount: Decimal
    ) -> ValidationResult:
        """
        Compare the sum of holding values with the reported total.

        Args:
            holdings: Committed holdings keyed by ISIN.
            total_amount: Total reported by the statement.

        Returns:
            ValidationResult, invalid if the totals do not reconcile.
        """
        result = ValidationResult()

        if not is_holdings_valid(holdings, total_amount, self.reconciliation_tolerance):
            computed = holdings_total(holdings.values())
            message = (
                f"Holdings total {computed} does not match "
                f"statement total {total_amount}"
            )
            logger.warning(message)
            result.add_error(message)

        return result

    def validate_holding(self, holding: Holding) -> ValidationResult:
        """
        Check a single holding for suspicious figures.

        Args:
            holding: Committed holding.

        Returns:
            ValidationResult carrying warnings only.
        """
        result = ValidationResult()

        if not validate_isin(holding.isin):
            result.add_warning(f"Unexpected ISIN format: {holding.isin}")

        if isinstance(holding, ConsolidatedHolding):
            price, stated = holding.nav, holding.market_value
        else:
            price, stated = holding.rate, holding.value

        if holding.units > 0 and price > 0 and stated > 0:
            calculated = holding.units * price
            diff_ratio = abs(calculated - stated) / stated
            if diff_ratio > self.value_tolerance:
                result.add_warning(
                    f"Value mismatch for {holding.isin}: "
                    f"calculated={calculated:.2f}, "
                    f"stated={stated:.2f}, "
                    f"diff={diff_ratio*100:.2f}%"
                )

        return result


def validate_statement(statement: HoldingsStatement) -> ValidationResult:
    """
    Convenience function to validate a parsed statement.

    Args:
        statement: Parsed statement to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    validator = HoldingsValidator()
    return validator.validate(statement)


def validate_isin(isin: str) -> bool:
    """
    Validate an ISIN format.

    Args:
        isin: ISIN string to validate.

    Returns:
        True if valid, False otherwise.
    """
    return bool(ISIN_PATTERN.match(isin))

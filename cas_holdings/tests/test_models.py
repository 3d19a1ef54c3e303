"""Tests for data models."""

from decimal import Decimal

import pytest

from cas_holdings.models import (
    INVALID_FILE_ERROR_MESSAGE,
    BrokerageHolding,
    ConsolidatedHolding,
    DraftState,
    HoldingsStatement,
    InvalidStatementError,
    StatementGrammar,
    TextRun,
    ValidationResult,
)


class TestTextRun:
    """Tests for TextRun dataclass."""

    def test_create_text_run(self):
        """Test creating a run with defaults."""
        run = TextRun(text="INF179K01234", x=10.0, y=100.0)

        assert run.width == 0.0
        assert run.height == 0.0
        assert run.end_of_line is False

    def test_text_run_is_immutable(self):
        """Test that runs cannot be modified."""
        run = TextRun(text="A", x=0, y=0)

        with pytest.raises(AttributeError):
            run.text = "B"


class TestConsolidatedHolding:
    """Tests for ConsolidatedHolding draft states."""

    def test_default_draft(self):
        """Test the empty draft."""
        draft = ConsolidatedHolding()

        assert draft.isin == ""
        assert draft.market_value == Decimal("0")
        assert draft.state is DraftState.AWAITING_KEY

    def test_awaiting_identifier(self):
        """Test a draft with a market value but no ISIN."""
        draft = ConsolidatedHolding(folio="12345678", market_value=Decimal("10.00"))

        assert draft.state is DraftState.AWAITING_IDENTIFIER

    def test_identifier_without_value(self):
        """Test a draft with an ISIN but no market value."""
        draft = ConsolidatedHolding(isin="INF179K01234")

        assert draft.state is DraftState.AWAITING_KEY

    def test_ready_to_commit(self):
        """Test a complete draft."""
        draft = ConsolidatedHolding(isin="INF179K01234", market_value=Decimal("10.00"))

        assert draft.state is DraftState.READY_TO_COMMIT
        assert draft.identifier == "INF179K01234"


class TestBrokerageHolding:
    """Tests for BrokerageHolding draft states."""

    def test_default_draft(self):
        """Test the empty draft."""
        assert BrokerageHolding().state is DraftState.AWAITING_KEY

    def test_figures_without_isin(self):
        """Test a draft with figures but no ISIN."""
        draft = BrokerageHolding(
            rate=Decimal("2500"), units=Decimal("10"), value=Decimal("25000")
        )

        assert draft.state is DraftState.AWAITING_IDENTIFIER

    def test_partial_figures(self):
        """Test that every figure must be non-zero."""
        draft = BrokerageHolding(
            isin="INE002A01018", rate=Decimal("2500"), units=Decimal("0"), value=Decimal("25000")
        )

        assert draft.state is DraftState.AWAITING_KEY

    def test_ready_to_commit(self):
        """Test a complete draft."""
        draft = BrokerageHolding(
            isin="INE002A01018", rate=Decimal("2500"), units=Decimal("10"), value=Decimal("25000")
        )

        assert draft.state is DraftState.READY_TO_COMMIT


class TestValidationResult:
    """Tests for ValidationResult dataclass."""

    def test_default_validation_result(self):
        """Test default validation result is valid."""
        result = ValidationResult()

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_add_error(self):
        """Test adding an error marks result as invalid."""
        result = ValidationResult()
        result.add_error("Totals do not reconcile")

        assert result.is_valid is False
        assert "Totals do not reconcile" in result.errors

    def test_add_warning(self):
        """Test adding a warning doesn't affect validity."""
        result = ValidationResult()
        result.add_warning("Unexpected ISIN format")

        assert result.is_valid is True
        assert len(result.warnings) == 1

    def test_merge_results(self):
        """Test merging validation results."""
        result1 = ValidationResult()
        result1.add_warning("Warning 1")

        result2 = ValidationResult()
        result2.add_error("Error 1")

        result1.merge(result2)

        assert result1.is_valid is False
        assert result1.errors == ["Error 1"]
        assert result1.warnings == ["Warning 1"]


class TestHoldingsStatement:
    """Tests for HoldingsStatement."""

    def test_consolidated_to_dict(self):
        """Test serializing a consolidated statement."""
        holding = ConsolidatedHolding(
            folio="12345678",
            isin="INF179K01234",
            nav_date="2024-01-01",
            nav=Decimal("10.50"),
            units=Decimal("100"),
            market_value=Decimal("1050.00"),
        )
        statement = HoldingsStatement(
            grammar=StatementGrammar.CONSOLIDATED,
            holdings={holding.isin: holding},
            page_count=2,
        )

        data = statement.to_dict()

        assert data["grammar"] == "consolidated"
        assert data["holdings"][0]["nav"] == "10.50"
        assert data["holdings"][0]["nav_date"] == "2024-01-01"
        assert data["holdings"][0]["folio"] == "12345678"
        assert data["validation"]["is_valid"] is True
        assert data["page_count"] == 2
        assert "reported_total" not in data

    def test_brokerage_to_dict(self):
        """Test that brokerage statements carry date and total."""
        statement = HoldingsStatement(
            grammar=StatementGrammar.BROKERAGE,
            holding_date="2024-01-15",
            reported_total=Decimal("25550.00"),
        )

        data = statement.to_dict()

        assert data["holding_date"] == "2024-01-15"
        assert data["reported_total"] == "25550.00"

    def test_is_valid_follows_validation(self):
        """Test the validity shortcut."""
        statement = HoldingsStatement(grammar=StatementGrammar.BROKERAGE)
        statement.validation.add_error("mismatch")

        assert statement.is_valid is False

    def test_get_holding(self):
        """Test looking up a holding by ISIN."""
        holding = BrokerageHolding(isin="INE002A01018")
        statement = HoldingsStatement(
            grammar=StatementGrammar.BROKERAGE, holdings={holding.isin: holding}
        )

        assert statement.get_holding("INE002A01018") is holding
        assert statement.get_holding("INE467B01029") is None


class TestInvalidStatementError:
    """Tests for InvalidStatementError."""

    def test_default_message(self):
        """Test the single user-facing message."""
        error = InvalidStatementError()

        assert str(error) == INVALID_FILE_ERROR_MESSAGE
        assert isinstance(error, ValueError)

"""Tests for line classification."""

import pytest

from cas_holdings.classifier import (
    BROKERAGE_ISIN_PATTERN,
    HOLDING_DATE_PATTERN,
    TOTAL_AMOUNT_PATTERN,
    LineClassifier,
    LineKind,
    find_holdings_start,
)


@pytest.fixture
def classifier():
    return LineClassifier()


class TestLineClassifier:
    """Tests for LineClassifier."""

    def test_version_banner_ignored(self, classifier):
        """Test that the statement version banner is ignored."""
        result = classifier.classify("  Version:V2.1 Live-12345678  ")

        assert result.kind is LineKind.IGNORED
        assert result.text == "Version:V2.1 Live-12345678"

    def test_eight_digit_folio(self, classifier):
        """Test that an 8 digit folio starts a key line."""
        result = classifier.classify("12345678/001\t1,234.56")

        assert result.kind is LineKind.KEY
        assert result.match.group(0) == "12345678"

    def test_eleven_and_twelve_digit_folio(self, classifier):
        """Test 11 and 12 digit folio numbers."""
        assert classifier.classify("18816743125 / 0 204,186.60").kind is LineKind.KEY
        assert classifier.classify("188167431251 204,186.60").kind is LineKind.KEY

    def test_other_digit_counts_are_not_folios(self, classifier):
        """Test that 9, 10 and leading-zero numbers are not folios."""
        assert classifier.classify("123456789 1.00").kind is LineKind.OTHER
        assert classifier.classify("1234567890 1.00").kind is LineKind.OTHER
        assert classifier.classify("01234567 1.00").kind is LineKind.OTHER

    def test_isin_line(self, classifier):
        """Test that an ISIN starts an identifier line."""
        result = classifier.classify("100 01-Jan-2024 10.50 INF179K01234 999.00")

        assert result.kind is LineKind.IDENTIFIER
        assert result.match.group(0) == "INF179K01234"

    def test_folio_takes_priority_over_isin(self, classifier):
        """Test that a line with both markers is a key line."""
        result = classifier.classify("12345678 INF179K01234")

        assert result.kind is LineKind.KEY

    def test_plain_line(self, classifier):
        """Test that a line without markers is classified as other."""
        assert classifier.classify("Scheme Name").kind is LineKind.OTHER

    def test_custom_ignore_list(self):
        """Test that the ignore list is configurable."""
        import re

        classifier = LineClassifier(ignored_patterns=[re.compile(r"^Page \d+")])

        assert classifier.is_ignored("Page 2 of 4")
        assert not classifier.is_ignored("Version:V2.1 Live-12345678")


class TestBrokeragePatterns:
    """Tests for brokerage statement patterns."""

    def test_isin_anchored(self):
        """Test that the ISIN must lead the line."""
        assert BROKERAGE_ISIN_PATTERN.match("INE002A01018 RELIANCE")
        assert BROKERAGE_ISIN_PATTERN.match("INF200K01RJ1 SBI")
        assert not BROKERAGE_ISIN_PATTERN.match("RELIANCE INE002A01018")
        assert not BROKERAGE_ISIN_PATTERN.match("INA002A01018")

    def test_holding_date(self):
        """Test the DD-MM-YYYY holding date pattern."""
        assert HOLDING_DATE_PATTERN.match("15-01-2024").group(0) == "15-01-2024"
        assert not HOLDING_DATE_PATTERN.match("15-Jan-2024")

    @pytest.mark.parametrize(
        "line", ["Total 10,000.25", "TOTAL   10,000.25", "total10,000.25"]
    )
    def test_total_amount(self, line):
        """Test the total pattern regardless of case and spacing."""
        assert TOTAL_AMOUNT_PATTERN.match(line).group(1) == "10,000.25"


class TestFindHoldingsStart:
    """Tests for the holdings heading search."""

    def test_heading_found(self):
        """Test finding the heading case-insensitively."""
        lines = ["Summary", "Transactions", "HOLDINGS BALANCE as on", "x"]

        assert find_holdings_start(lines) == 2

    def test_heading_missing(self):
        """Test that a missing heading gives -1."""
        assert find_holdings_start(["Summary", "Total 1.00"]) == -1

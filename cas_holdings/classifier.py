"""
Line classification for reconstructed statement text.

Decides whether a line is boilerplate to skip and which record-start
marker, if any, it carries.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Pattern

# Boilerplate lines that never contribute to a holding
IGNORED_LINE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"Version:(V\d+\.\d+)\s+(Live-\d+)"),
]

# Consolidated statement markers
FOLIO_PATTERN = re.compile(r"\b(?:[1-9]\d{7}|[1-9]\d{10,11})\b")
ISIN_PATTERN = re.compile(r"INF[A-Z0-9]+")

# Brokerage statement markers
HOLDINGS_HEADING_PATTERNS: List[Pattern[str]] = [
    re.compile(r"holdings balance", re.IGNORECASE),
]
BROKERAGE_ISIN_PATTERN = re.compile(r"^IN[EF]\d[A-Z0-9]+")
HOLDING_DATE_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{4}")
TOTAL_AMOUNT_PATTERN = re.compile(r"^total\s*([\d,]+\.?\d*)", re.IGNORECASE)


class LineKind(Enum):
    """Kinds of lines in the consolidated statement grammar."""
    IGNORED = auto()
    KEY = auto()
    IDENTIFIER = auto()
    OTHER = auto()


@dataclass
class ClassifiedLine:
    """
    A trimmed line with its classification.

    Attributes:
        text: Trimmed line text
        kind: Line kind
        match: Regex match that decided the kind, if any
    """
    text: str
    kind: LineKind
    match: Optional[re.Match] = None


class LineClassifier:
    """
    Classifies trimmed lines against fixed patterns.

    The ignore list is checked first; then the folio (primary key) pattern,
    which takes priority over the ISIN (secondary identifier) pattern.
    """

    def __init__(
        self,
        ignored_patterns: Optional[List[Pattern[str]]] = None,
        key_pattern: Pattern[str] = FOLIO_PATTERN,
        identifier_pattern: Pattern[str] = ISIN_PATTERN,
    ):
        self.ignored_patterns = (
            IGNORED_LINE_PATTERNS if ignored_patterns is None else ignored_patterns
        )
        self.key_pattern = key_pattern
        self.identifier_pattern = identifier_pattern

    def is_ignored(self, line: str) -> bool:
        """Check whether a trimmed line is boilerplate."""
        return any(pattern.search(line) for pattern in self.ignored_patterns)

    def classify(self, line: str) -> ClassifiedLine:
        """
        Classify a raw line.

        Args:
            line: Raw reconstructed line.

        Returns:
            ClassifiedLine holding the trimmed text, its kind and match.
        """
        trimmed = line.strip()

        if self.is_ignored(trimmed):
            return ClassifiedLine(trimmed, LineKind.IGNORED)

        key_match = self.key_pattern.search(trimmed)
        if key_match:
            return ClassifiedLine(trimmed, LineKind.KEY, key_match)

        identifier_match = self.identifier_pattern.search(trimmed)
        if identifier_match:
            return ClassifiedLine(trimmed, LineKind.IDENTIFIER, identifier_match)

        return ClassifiedLine(trimmed, LineKind.OTHER)


def find_holdings_start(lines: List[str]) -> int:
    """
    Find the index of the first line carrying a holdings section heading.

    Args:
        lines: Reconstructed document lines.

    Returns:
        Index of the heading line, or -1 if there is none.
    """
    for index, line in enumerate(lines):
        if any(pattern.search(line) for pattern in HOLDINGS_HEADING_PATTERNS):
            return index
    return -1

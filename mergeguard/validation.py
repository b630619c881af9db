"""
Placeholder validation for transformed text.

Compares the placeholders of an original text with those of its
translation and reports what went missing, what appeared, and which
malformed remnants look like damaged placeholders.

The corruption checks are pattern-based heuristics: they can both miss
and over-report damage, so results are advisory.
"""

from __future__ import annotations

import re
from typing import Optional

from mergeguard.models import ValidationResult
from mergeguard.scanner import extract_raw


# ============================================================================
# Corruption Patterns
# ============================================================================

CORRUPTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\*\|[^|]*\Z"),        # Unclosed *|
    re.compile(r"\{\{[^}]*\Z"),        # Unclosed {{
    re.compile(r"\*\|[^|]*\|(?!\*)"),  # *|VAR| without final *
)


def find_corruptions(text: Optional[str]) -> list[str]:
    """Collect substrings of text that look like damaged placeholders.

    Matches are gathered rule by rule and are not deduplicated.
    """
    if not text:
        return []
    corrupted: list[str] = []
    for pattern in CORRUPTION_PATTERNS:
        corrupted.extend(match.group(0) for match in pattern.finditer(text))
    return corrupted


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def validate_placeholders(
    original: Optional[str],
    translated: Optional[str],
) -> ValidationResult:
    """Check that a translation kept exactly the placeholders of the original.

    Args:
        original: Text before the transformation
        translated: Text after the transformation (and restoration)

    Returns:
        ValidationResult; ``is_valid`` only if nothing is missing, added
        or corrupted
    """
    original_set = _unique(extract_raw(original))
    translated_set = _unique(extract_raw(translated))

    translated_lookup = set(translated_set)
    original_lookup = set(original_set)

    missing = [raw for raw in original_set if raw not in translated_lookup]
    added = [raw for raw in translated_set if raw not in original_lookup]
    corrupted = find_corruptions(translated)

    return ValidationResult.from_lists(missing, added, corrupted)

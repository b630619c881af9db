"""
Placeholder scanner.

Finds every placeholder of every supported syntax in a string and
returns them as one left-to-right list of Occurrences with exact offsets.

Supported syntaxes:
- Simple merge vars:   *|FNAME|*
- Template vars:       {{first_name}}
- Global vars:         *|GLOBAL:SIGNATURE|*   (keyword case-insensitive)
- Conditional markers: *|IF:VIP|*, *|ELSEIF:VIP|*, *|ELSE:|*, *|END:IF|*

Design:
- One independent pattern per format, applied to the full text
- The grammars are mutually exclusive: names never contain ':', and the
  global and conditional grammars differ in the keyword right after '*|'.
  A new format must not be a textual subset of an existing one.
- Occurrences are flat spans; nesting is not detected
"""

from __future__ import annotations

import re
from typing import Optional

from mergeguard.models import Occurrence, PlaceholderFormat


# ============================================================================
# Pattern Definitions
# ============================================================================

NAME = r"[A-Za-z_][A-Za-z0-9_]*"

SIMPLE_VAR_PATTERN = re.compile(rf"\*\|({NAME})\|\*")

TEMPLATE_VAR_PATTERN = re.compile(rf"\{{\{{({NAME})\}}\}}")

GLOBAL_VAR_PATTERN = re.compile(rf"\*\|GLOBAL:({NAME})\|\*", re.IGNORECASE)

# The colon is mandatory so that *|ELSE|* stays a simple var
CONDITIONAL_PATTERN = re.compile(
    rf"\*\|(?:(IF|ELSEIF):({NAME})|(ELSE):|(END:IF))\|\*",
    re.IGNORECASE,
)

PATTERNS: dict[PlaceholderFormat, re.Pattern[str]] = {
    PlaceholderFormat.SIMPLE_VAR: SIMPLE_VAR_PATTERN,
    PlaceholderFormat.TEMPLATE_VAR: TEMPLATE_VAR_PATTERN,
    PlaceholderFormat.GLOBAL_VAR: GLOBAL_VAR_PATTERN,
    PlaceholderFormat.CONDITIONAL: CONDITIONAL_PATTERN,
}


def _occurrence_name(fmt: PlaceholderFormat, match: re.Match[str]) -> str:
    if fmt is not PlaceholderFormat.CONDITIONAL:
        return match.group(1)
    keyword, variable, else_kw, end_kw = match.groups()
    # Markers without a variable are named after their keyword
    return variable or else_kw or end_kw or keyword


def scan(text: Optional[str]) -> list[Occurrence]:
    """Find all placeholders in text, ordered by start offset.

    Args:
        text: Text to scan; None or empty yields an empty list

    Returns:
        List of Occurrence sorted by ``start``
    """
    if not text:
        return []

    found: list[Occurrence] = []
    for fmt, pattern in PATTERNS.items():
        for match in pattern.finditer(text):
            found.append(Occurrence(
                raw=match.group(0),
                name=_occurrence_name(fmt, match),
                format=fmt,
                start=match.start(),
                end=match.end(),
            ))

    found.sort(key=lambda occ: occ.start)

    # Adjacent markers can share a '*' ("*|A|*|END:IF|*"); keep the first span
    disjoint: list[Occurrence] = []
    for occ in found:
        if disjoint and occ.start < disjoint[-1].end:
            continue
        disjoint.append(occ)
    return disjoint


def extract_raw(text: Optional[str]) -> list[str]:
    """Return the raw placeholder strings of text in order of appearance."""
    return [occ.raw for occ in scan(text)]

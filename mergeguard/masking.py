"""
Masking module for shielding placeholders from an opaque text transformation.

Before a template text goes to a translation service every placeholder is
swapped for a positional token (__PH_0__, __PH_1__, ...). Afterwards the
tokens are swapped back. Translation services treat the whole text as prose,
so the tokens must survive reordering and spacing drift around them.

Design:
- Tokens are a zero-based index into the occurrences of one protect call;
  a ProtectionMap is only valid against the text it was produced with
- The stored value of a token is the raw placeholder plus at most one
  whitespace character captured from each side in the source text
- The protected text keeps its own whitespace; only the placeholder span
  is replaced
- On restore, the captured whitespace tells which side of the token to
  normalize, and exactly the captured character is written back:
  - a captured space or tab absorbs the space/tab run between the token
    and the neighbouring word; indentation at a line start and spaces
    before a line end keep their width
  - any other captured whitespace (line breaks) absorbs at most one copy
    of itself plus spaces/tabs between it and the token
- Restore is the identity on an untouched protected text, except that a
  run of two or more spaces/tabs between a placeholder and the next
  non-blank text collapses to the captured character
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Union

from mergeguard.config import TOKEN_PREFIX, TOKEN_SUFFIX
from mergeguard.scanner import scan


TOKEN_PATTERN = re.compile(rf"{re.escape(TOKEN_PREFIX)}\d+{re.escape(TOKEN_SUFFIX)}")

TOKEN_ONLY_PATTERN = re.compile(rf"\s*(?:{TOKEN_PATTERN.pattern}\s*)+")

# Captured characters whose neighbouring runs may be normalized on restore
HORIZONTAL = " \t"
HSPACE = r"[ \t]*"


def make_token(index: int) -> str:
    return f"{TOKEN_PREFIX}{index}{TOKEN_SUFFIX}"


@dataclass
class ProtectionMap:
    """Ordered mapping of protection token -> stored placeholder text.

    Insertion order follows the token index, which makes iteration
    deterministic even though restoration does not depend on it.
    """
    mappings: dict[str, str] = field(default_factory=dict)

    def register(self, index: int, stored: str) -> str:
        """Store text for the occurrence at index and return its token."""
        token = make_token(index)
        self.mappings[token] = stored
        return token

    def restore(self, text: str) -> str:
        return restore_placeholders(text, self)

    @property
    def tokens(self) -> list[str]:
        return list(self.mappings)

    def items(self):
        return self.mappings.items()

    def __len__(self) -> int:
        return len(self.mappings)

    def __iter__(self) -> Iterator[str]:
        return iter(self.mappings)

    def __getitem__(self, token: str) -> str:
        return self.mappings[token]

    def __contains__(self, token: object) -> bool:
        return token in self.mappings

    def to_dict(self) -> dict[str, str]:
        return dict(self.mappings)

    @classmethod
    def from_dict(cls, d: Mapping[str, str]) -> ProtectionMap:
        return cls(mappings=dict(d))


@dataclass
class ProtectionResult:
    """Protected text together with the map needed to undo it."""
    protected_text: str
    token_map: ProtectionMap

    def __iter__(self):
        # Allows: protected, token_map = protect_placeholders(text)
        yield self.protected_text
        yield self.token_map


# ============================================================================
# Protect / Restore
# ============================================================================

def protect_placeholders(text: Optional[str]) -> ProtectionResult:
    """Replace every placeholder in text with a positional token.

    Args:
        text: Template text; None is treated as empty

    Returns:
        ProtectionResult with the protected text and its ProtectionMap
    """
    text = text or ""
    occurrences = scan(text)
    token_map = ProtectionMap()

    stored_values = []
    for occ in occurrences:
        prefix = ""
        suffix = ""
        if occ.start > 0 and text[occ.start - 1].isspace():
            prefix = text[occ.start - 1]
        if occ.end < len(text) and text[occ.end].isspace():
            suffix = text[occ.end]
        stored_values.append(prefix + occ.raw + suffix)

    for index, stored in enumerate(stored_values):
        token_map.register(index, stored)

    # Rewrite from the last occurrence so earlier offsets stay valid
    protected = text
    for index in range(len(occurrences) - 1, -1, -1):
        occ = occurrences[index]
        protected = protected[:occ.start] + make_token(index) + protected[occ.end:]

    return ProtectionResult(protected_text=protected, token_map=token_map)


def _leading_pattern(ch: str) -> str:
    if not ch.isspace():
        return ""
    if ch in HORIZONTAL:
        # A run after a word collapses; indentation loses only the captured char
        return rf"(?:(?<=\S){HSPACE}|[ \t]?)"
    return "(?:" + re.escape(ch) + ")?" + HSPACE


def _trailing_pattern(ch: str) -> str:
    if not ch.isspace():
        return ""
    if ch in HORIZONTAL:
        # A run before a word collapses; spaces before a line end stay
        return rf"(?:{HSPACE}(?=\S)|[ \t]?)"
    return HSPACE + "(?:" + re.escape(ch) + ")?"


def _token_pattern(token: str, stored: str) -> re.Pattern[str]:
    leading = _leading_pattern(stored[0]) if stored else ""
    trailing = _trailing_pattern(stored[-1]) if stored else ""
    return re.compile(leading + re.escape(token) + trailing)


def restore_placeholders(
    text: Optional[str],
    token_map: Union[ProtectionMap, Mapping[str, str]],
) -> str:
    """Swap protection tokens in text back to their stored placeholders.

    Every occurrence of each token is replaced, including duplicates the
    transformation may have introduced. Tokens missing from the text are
    simply not restored; the validator reports them.

    Args:
        text: Transformed text containing tokens
        token_map: Map returned by protect_placeholders (or its dict form)

    Returns:
        Text with placeholders restored
    """
    restored = text or ""
    for token, stored in token_map.items():
        pattern = _token_pattern(token, stored)
        restored = pattern.sub(lambda _match, value=stored: value, restored)
    return restored


# ============================================================================
# Utility Functions
# ============================================================================

def extract_tokens(text: Optional[str]) -> list[str]:
    """Extract all protection tokens from text, in order."""
    return TOKEN_PATTERN.findall(text or "")


def is_only_tokens(text: Optional[str]) -> bool:
    """True when text consists of nothing but tokens and whitespace."""
    return bool(text) and TOKEN_ONLY_PATTERN.fullmatch(text) is not None

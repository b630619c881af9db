"""
Translation seam for mergeguard.

This module provides:
- The Translator interface the pipeline drives
- A dummy backend for tests and dry runs
- An adapter for plugging in external transports as plain functions
"""

from mergeguard.translate.base import (
    Translator,
    TranslationResult,
    TranslationContext,
    DummyTranslator,
    CallableTranslator,
    create_translator,
)

__all__ = [
    "Translator",
    "TranslationResult",
    "TranslationContext",
    "DummyTranslator",
    "CallableTranslator",
    "create_translator",
]

"""
mergeguard: placeholder-safe handling of email template text

Detects merge tags in every syntax a template may use, shields them from
machine translation, restores and verifies them afterwards, and renders
them with test values for previews.

License: MIT
"""

__version__ = "0.1.0"

from mergeguard.models import (
    PlaceholderFormat,
    Occurrence,
    CatalogEntry,
    FieldLocation,
    ValidationResult,
    Template,
    RenderedTemplate,
)
from mergeguard.scanner import scan
from mergeguard.catalog import build_catalog, count_placeholders
from mergeguard.masking import ProtectionMap, protect_placeholders, restore_placeholders
from mergeguard.validation import validate_placeholders
from mergeguard.render import render, render_template
from mergeguard.pipeline import TranslationPipeline, PipelineConfig
from mergeguard.translate import Translator, DummyTranslator, CallableTranslator, create_translator

__all__ = [
    "PlaceholderFormat",
    "Occurrence",
    "CatalogEntry",
    "FieldLocation",
    "ValidationResult",
    "Template",
    "RenderedTemplate",
    "scan",
    "build_catalog",
    "count_placeholders",
    "ProtectionMap",
    "protect_placeholders",
    "restore_placeholders",
    "validate_placeholders",
    "render",
    "render_template",
    "TranslationPipeline",
    "PipelineConfig",
    "Translator",
    "DummyTranslator",
    "CallableTranslator",
    "create_translator",
]

"""
Translation pipeline for mergeguard.

This module orchestrates the placeholder-safe translation workflow:
1. Protect placeholders with positional tokens
2. Send the protected text through the translator (an opaque black box)
3. Restore placeholders from the token map
4. Validate the restored text against the original

Each text gets its own protect call and its own token map; texts in a
batch are independent of one another.

Design Philosophy:
- Pipeline is configurable via PipelineConfig
- A failing translator never aborts a batch: the error is recorded and
  the source text is kept
- Progress callbacks for CLI integration
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from mergeguard.config import TRANSLATABLE_FIELDS
from mergeguard.masking import ProtectionMap, is_only_tokens, protect_placeholders, restore_placeholders
from mergeguard.models import Template, ValidationResult
from mergeguard.translate.base import Translator, TranslationContext, create_translator
from mergeguard.validation import validate_placeholders

logger = logging.getLogger(__name__)

# Type alias for progress callbacks
ProgressCallback = Callable[[str, float], None]


@dataclass
class PipelineConfig:
    """Configuration for the translation pipeline."""
    # Translation settings
    source_lang: str = "en"
    target_lang: str = "fr"
    translator_backend: str = "dummy"  # 'dummy', 'callable'
    translator_kwargs: dict = field(default_factory=dict)

    # Protection settings
    protect_placeholders: bool = True
    skip_token_only: bool = True  # Don't translate texts that are only placeholders

    def to_dict(self) -> dict:
        """Serialize config for logging/debugging."""
        return {
            "source_lang": self.source_lang,
            "target_lang": self.target_lang,
            "translator_backend": self.translator_backend,
            "protect_placeholders": self.protect_placeholders,
            "skip_token_only": self.skip_token_only,
        }


@dataclass
class TextTranslation:
    """Everything known about one text after a pipeline run."""
    source_text: str
    protected_text: str
    translated_text: str
    validation: ValidationResult
    token_map: ProtectionMap = field(default_factory=ProtectionMap)
    skipped: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source_text": self.source_text,
            "protected_text": self.protected_text,
            "translated_text": self.translated_text,
            "validation": self.validation.to_dict(),
            "token_map": self.token_map.to_dict(),
            "skipped": self.skipped,
            "error": self.error,
        }


@dataclass
class PipelineResult:
    """Result of translating a batch of texts."""
    items: list[TextTranslation]
    config: PipelineConfig
    stats: dict = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    @property
    def all_valid(self) -> bool:
        return all(item.validation.is_valid for item in self.items)

    @property
    def translated_texts(self) -> list[str]:
        return [item.translated_text for item in self.items]

    @property
    def validations(self) -> list[ValidationResult]:
        return [item.validation for item in self.items]


@dataclass
class TemplateTranslation:
    """A template with its translatable fields run through the pipeline."""
    template: Template
    fields: dict[str, TextTranslation] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return all(t.validation.is_valid for t in self.fields.values())

    @property
    def errors(self) -> list[str]:
        return [f"{name}: {t.error}" for name, t in self.fields.items() if t.error]


class TranslationPipeline:
    """Placeholder-safe translation of template texts.

    Usage:
        pipeline = TranslationPipeline(translator=CallableTranslator(my_vendor_call))
        outcome = pipeline.translate_text("Hello *|FNAME|*!")

        if not outcome.validation.is_valid:
            print(outcome.validation.warnings)
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        translator: Translator | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        self.config = config or PipelineConfig()
        self.progress_callback = progress_callback or (lambda msg, pct: None)
        self.translator = translator or create_translator(
            backend=self.config.translator_backend,
            **self.config.translator_kwargs,
        )
        self.context = TranslationContext(
            source_lang=self.config.source_lang,
            target_lang=self.config.target_lang,
        )
        logger.debug("Pipeline ready with %s: %s", self.translator.name, self.config.to_dict())

    def translate_text(self, text: str) -> TextTranslation:
        """Protect, translate, restore and validate a single text."""
        text = text or ""

        if self.config.protect_placeholders:
            protected, token_map = protect_placeholders(text)
        else:
            protected, token_map = text, ProtectionMap()

        skipped = False
        error = None
        if self.config.skip_token_only and (not protected.strip() or is_only_tokens(protected)):
            # Nothing translatable; don't give the translator a chance to mangle tokens
            translated = protected
            skipped = True
        else:
            try:
                translated = self.translator.translate(protected, self.context).text
            except Exception as e:
                logger.exception("Translation failed with %s", self.translator.name)
                error = str(e)
                translated = protected  # Fallback

        restored = restore_placeholders(translated, token_map) if token_map else translated
        validation = validate_placeholders(text, restored)
        if not validation.is_valid:
            logger.warning("Placeholder check failed: %s", " | ".join(validation.warnings))

        return TextTranslation(
            source_text=text,
            protected_text=protected,
            translated_text=restored,
            validation=validation,
            token_map=token_map,
            skipped=skipped,
            error=error,
        )

    def translate_batch(self, texts: list[str]) -> PipelineResult:
        """Translate several independent texts.

        Args:
            texts: Texts to translate

        Returns:
            PipelineResult with one TextTranslation per input, in order
        """
        items: list[TextTranslation] = []
        errors: list[str] = []
        total = len(texts)

        for i, text in enumerate(texts):
            self.progress_callback(f"Translating text {i + 1}/{total}...", i / max(total, 1))
            item = self.translate_text(text)
            if item.error:
                errors.append(f"Translation failed for text {i}: {item.error}")
            items.append(item)

        self.progress_callback("Complete!", 1.0)

        stats = {
            "total_texts": total,
            "translated_texts": sum(1 for it in items if not it.skipped and not it.error),
            "skipped_texts": sum(1 for it in items if it.skipped),
            "failed_texts": sum(1 for it in items if it.error),
            "invalid_texts": sum(1 for it in items if not it.validation.is_valid),
            "placeholders_protected": sum(len(it.token_map) for it in items),
        }
        logger.info("Batch finished: %s", stats)

        return PipelineResult(items=items, config=self.config, stats=stats, errors=errors)

    def translate_template(self, template: Template) -> TemplateTranslation:
        """Translate the translatable fields of a template.

        Empty fields and sender addresses are left untouched. The returned
        template is a copy; the input is not modified.
        """
        results: dict[str, TextTranslation] = {}
        updates: dict[str, str] = {}

        for name in TRANSLATABLE_FIELDS:
            value = getattr(template, name)
            if not value:
                continue
            self.progress_callback(f"Translating {name}...", len(results) / len(TRANSLATABLE_FIELDS))
            outcome = self.translate_text(value)
            results[name] = outcome
            updates[name] = outcome.translated_text

        self.progress_callback("Complete!", 1.0)
        return TemplateTranslation(template=dataclasses.replace(template, **updates), fields=results)


# ============================================================================
# Convenience Functions
# ============================================================================

def translate_text(
    text: str,
    translator: Translator | Callable[[str, str, str], str],
    source_lang: str = "en",
    target_lang: str = "fr",
) -> TextTranslation:
    """Quick placeholder-safe translation of one text.

        outcome = translate_text("Hi *|FNAME|*", my_vendor_call, target_lang="de")

    For more control, use TranslationPipeline directly.
    """
    if not isinstance(translator, Translator):
        translator = create_translator("callable", fn=translator)
    config = PipelineConfig(source_lang=source_lang, target_lang=target_lang)
    return TranslationPipeline(config, translator=translator).translate_text(text)

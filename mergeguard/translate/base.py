"""
Base translator interface and implementations.

This module defines:
- Abstract Translator interface that every transformation backend implements
- DummyTranslator to exercise the pipeline offline (echo, drift, mangling)
- CallableTranslator to plug any ``str -> str`` function in as a backend

mergeguard never calls a translation vendor itself. Vendor transports
live outside this package and are wrapped as a Translator (usually via
CallableTranslator); to the pipeline they are an opaque text-in/text-out
black box.

Design Philosophy:
- Translators are stateless: they receive all context in each call
- All translators return TranslationResult with metadata
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from mergeguard.masking import TOKEN_PATTERN


# A protection token with the single space on either side, if any
DRIFT_PATTERN = re.compile(rf" ?{TOKEN_PATTERN.pattern} ?")


@dataclass
class TranslationResult:
    """Result of a translation operation.

    Attributes:
        text: The translated text
        source_text: Text that was sent to the translator
        metadata: Additional info (backend name, mode, ...)
    """
    text: str
    source_text: str
    metadata: dict = field(default_factory=dict)


@dataclass
class TranslationContext:
    """Language pair passed along with each text."""
    source_lang: str = "en"
    target_lang: str = "fr"


class Translator(ABC):
    """Abstract base class for all translation backends.

    All translators must implement:
    - name: backend identifier
    - translate(): Translate a single text
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the translator name (e.g., 'dummy-echo', 'callable')."""
        pass

    @abstractmethod
    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        """Translate a single text.

        Args:
            text: Text to translate (placeholders already protected)
            context: Optional language pair

        Returns:
            TranslationResult with translation and metadata
        """
        pass

    def translate_batch(
        self,
        texts: list[str],
        context: TranslationContext | None = None,
    ) -> list[TranslationResult]:
        """Translate multiple texts.

        Default implementation calls translate() in a loop.
        Override for backends that support batching.
        """
        return [self.translate(text, context) for text in texts]


def _drift(text: str) -> str:
    # Double the single spaces a vendor tends to pad around tokens
    return DRIFT_PATTERN.sub(lambda m: m.group(0).replace(" ", "  "), text)


class DummyTranslator(Translator):
    """An offline translator for exercising the pipeline without a vendor.

    Each mode stands in for one kind of vendor behaviour:
    - 'echo': identity; restore must give back the source exactly
    - 'upper': uppercases everything; shows why placeholders need protecting
    - 'prefix': adds a [TRANSLATED] marker; text changes, tokens survive
    - 'reverse': reverses the text, mangling every token so validation fails
    - 'drift': pads spaces around tokens; restore normalizes them back
    """

    MODES: dict[str, Callable[[str], str]] = {
        "echo": lambda text: text,
        "upper": str.upper,
        "prefix": lambda text: f"[TRANSLATED] {text}",
        "reverse": lambda text: text[::-1],
        "drift": _drift,
    }

    def __init__(self, mode: str = "echo"):
        if mode not in self.MODES:
            raise ValueError(f"Unknown dummy mode: {mode}. Available modes: {', '.join(self.MODES)}")
        self.mode = mode

    @property
    def name(self) -> str:
        return f"dummy-{self.mode}"

    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        return TranslationResult(
            text=self.MODES[self.mode](text),
            source_text=text,
            metadata={"translator": self.name, "mode": self.mode},
        )


class CallableTranslator(Translator):
    """Adapter turning a plain function into a Translator.

    The function receives the text and the context's language pair:
    ``fn(text, source_lang, target_lang) -> str``.
    """

    def __init__(self, fn: Callable[[str, str, str], str], name: str = "callable"):
        self.fn = fn
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        context = context or TranslationContext()
        translated = self.fn(text, context.source_lang, context.target_lang)
        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={"translator": self.name},
        )


def create_translator(backend: str, **kwargs) -> Translator:
    """Factory function to create a translator by name.

    Args:
        backend: Translator backend name
        **kwargs: Backend-specific arguments

    Returns:
        Configured Translator instance

    Supported backends and aliases:
        - dummy, echo, test: DummyTranslator (``mode`` kwarg, default 'echo')
        - callable, function: CallableTranslator (``fn`` kwarg required)
    """
    backend_lower = backend.lower().replace("_", "-")

    if backend_lower in ("dummy", "echo", "test"):
        mode = kwargs.get("mode", "echo")
        return DummyTranslator(mode=mode)

    elif backend_lower in ("callable", "function"):
        fn = kwargs.get("fn")
        if fn is None:
            raise ValueError("The callable backend requires an 'fn' argument")
        return CallableTranslator(fn=fn, name=kwargs.get("name", "callable"))

    else:
        available = ["dummy", "callable"]
        raise ValueError(
            f"Unknown translator backend: {backend}. "
            f"Available backends: {', '.join(available)}"
        )

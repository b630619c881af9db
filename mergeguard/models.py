"""
Core data models for mergeguard.

These models describe placeholders found in email templates and the
results produced by the catalog, validation and preview layers.

Design Philosophy:
- Immutable-ish: occurrences are frozen, aggregates are plain dataclasses
- Serializable: every model converts to a JSON-friendly dict via to_dict()
- Transient: nothing here is persisted; each object lives for one call
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mergeguard.config import TEMPLATE_FIELDS


class PlaceholderFormat(str, Enum):
    """Placeholder syntaxes understood by the scanner.

    Declaration order is the canonical priority order used when
    sorting catalog entries.
    """
    SIMPLE_VAR = "simple-var"        # *|VAR|*
    TEMPLATE_VAR = "template-var"    # {{var}}
    GLOBAL_VAR = "global-var"        # *|GLOBAL:VAR|*
    CONDITIONAL = "conditional"      # *|IF:VAR|*, *|ELSEIF:VAR|*, *|ELSE:|*, *|END:IF|*

    @property
    def priority(self) -> int:
        return list(PlaceholderFormat).index(self)


@dataclass(frozen=True)
class Occurrence:
    """A single placeholder found in a text.

    ``text[start:end] == raw`` always holds for the text that was scanned.
    For conditionals without a variable (``*|ELSE:|*``, ``*|END:IF|*``)
    the name is the keyword itself.
    """
    raw: str
    name: str
    format: PlaceholderFormat
    start: int
    end: int

    @property
    def key(self) -> str:
        return f"{self.format.value}:{self.name}"

    def to_dict(self) -> dict:
        return {
            "raw": self.raw,
            "name": self.name,
            "format": self.format.value,
            "start": self.start,
            "end": self.end,
        }


@dataclass
class FieldLocation:
    """Usage of one placeholder inside one template field."""
    field: str
    count: int = 0
    examples: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"field": self.field, "count": self.count, "examples": list(self.examples)}


@dataclass
class CatalogEntry:
    """A distinct placeholder, aggregated over all scanned fields."""
    name: str
    format: PlaceholderFormat
    locations: list[FieldLocation] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def total_count(self) -> int:
        return sum(loc.count for loc in self.locations)

    def location(self, field_name: str) -> Optional[FieldLocation]:
        for loc in self.locations:
            if loc.field == field_name:
                return loc
        return None

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "format": self.format.value,
            "locations": [loc.to_dict() for loc in self.locations],
        }
        if self.description is not None:
            d["description"] = self.description
        return d


@dataclass
class ValidationResult:
    """Outcome of comparing placeholders before and after a transformation.

    ``warnings`` is always derived from the three lists; build instances
    with :meth:`from_lists` so the two never disagree.
    """
    is_valid: bool
    warnings: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    corrupted: list[str] = field(default_factory=list)

    @classmethod
    def from_lists(
        cls,
        missing: list[str],
        added: list[str],
        corrupted: list[str],
    ) -> ValidationResult:
        warnings = []
        if missing:
            warnings.append(f"Missing {len(missing)} placeholder(s): {', '.join(missing)}")
        if added:
            warnings.append(f"Added {len(added)} unexpected placeholder(s): {', '.join(added)}")
        if corrupted:
            warnings.append(f"Found {len(corrupted)} corrupted placeholder(s): {', '.join(corrupted)}")
        return cls(
            is_valid=not (missing or added or corrupted),
            warnings=warnings,
            missing=list(missing),
            added=list(added),
            corrupted=list(corrupted),
        )

    @property
    def has_critical_issues(self) -> bool:
        """Lost or damaged placeholders; unexpected extras are only a warning."""
        return bool(self.missing or self.corrupted)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "warnings": list(self.warnings),
            "missing": list(self.missing),
            "added": list(self.added),
            "corrupted": list(self.corrupted),
        }


@dataclass
class Template:
    """A hosted email template: main content plus its published variant.

    Only the ten content fields matter to mergeguard; ``from_dict``
    ignores any other keys the hosting API returns.
    """
    name: str = ""
    slug: str = ""
    code: Optional[str] = None
    text: Optional[str] = None
    subject: Optional[str] = None
    from_name: Optional[str] = None
    from_email: Optional[str] = None
    publish_code: Optional[str] = None
    publish_text: Optional[str] = None
    publish_subject: Optional[str] = None
    publish_from_name: Optional[str] = None
    publish_from_email: Optional[str] = None

    def fields(self) -> dict[str, Optional[str]]:
        """Return the ten content fields in canonical order."""
        return {name: getattr(self, name) for name in TEMPLATE_FIELDS}

    def to_dict(self) -> dict:
        return {"name": self.name, "slug": self.slug, **self.fields()}

    @classmethod
    def from_dict(cls, d: dict) -> Template:
        kwargs = {name: d.get(name) for name in TEMPLATE_FIELDS}
        return cls(
            name=d.get("name") or "",
            slug=d.get("slug") or d.get("name") or "",
            **kwargs,
        )


@dataclass
class RenderedTemplate:
    """A template with merge and global values filled in, for preview."""
    subject: str = ""
    from_name: str = ""
    from_email: str = ""
    html_content: str = ""
    text_content: str = ""

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "from_name": self.from_name,
            "from_email": self.from_email,
            "html_content": self.html_content,
            "text_content": self.text_content,
        }

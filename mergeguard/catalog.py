"""
Placeholder catalog.

Scans the ten content fields of a template and aggregates every
placeholder into a deduplicated inventory for display: one entry per
(format, name) with per-field usage counts and a few raw examples.

Ordering is by canonical format priority, then case-sensitive name.
It carries no meaning beyond stable presentation.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

from mergeguard.config import MAX_EXAMPLES, STANDARD_PLACEHOLDERS, TEMPLATE_FIELDS
from mergeguard.models import CatalogEntry, FieldLocation, Template
from mergeguard.scanner import scan


FieldSource = Union[Template, Mapping[str, Optional[str]]]


def _field_values(fields: FieldSource) -> list[tuple[str, Optional[str]]]:
    if isinstance(fields, Template):
        fields = fields.fields()
    # Only the known template fields are scanned, in canonical order
    return [(name, fields.get(name)) for name in TEMPLATE_FIELDS]


def build_catalog(fields: FieldSource) -> list[CatalogEntry]:
    """Build the placeholder inventory of a template.

    Args:
        fields: A Template, or a mapping of field name to text (None allowed)

    Returns:
        CatalogEntry list sorted by format priority, then name
    """
    entries: dict[str, CatalogEntry] = {}

    for field_name, value in _field_values(fields):
        if not value:
            continue

        for occ in scan(value):
            entry = entries.get(occ.key)
            if entry is None:
                entry = CatalogEntry(
                    name=occ.name,
                    format=occ.format,
                    description=STANDARD_PLACEHOLDERS.get(occ.name),
                )
                entries[occ.key] = entry

            location = entry.location(field_name)
            if location is None:
                location = FieldLocation(field=field_name)
                entry.locations.append(location)

            location.count += 1
            if len(location.examples) < MAX_EXAMPLES and occ.raw not in location.examples:
                location.examples.append(occ.raw)

    return sorted(entries.values(), key=lambda e: (e.format.priority, e.name))


def count_placeholders(fields: FieldSource) -> int:
    """Number of distinct placeholders across all template fields."""
    return len(build_catalog(fields))

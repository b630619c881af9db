"""
Placeholder rendering for previews and test sends.

Fills the placeholders of a template text with supplied values. The
renderer works off the scanner's occurrence list, so it shares one
grammar with protection and validation, and substitutes by
(format, name) in a single pass.

Rules:
- *|NAME|* and *|GLOBAL:NAME|* match a key spelled exactly like NAME or
  whose upper-case form equals NAME; {{name}} matches its key exactly.
  When several keys match, the first one in the mapping wins.
- *|IF:NAME|* ... *|END:IF|* keeps its content (markers dropped) when
  merge_vars has a truthy value for NAME or NAME.lower(); otherwise the
  whole span is dropped. Conditionals do not nest: an IF pairs with the
  next END:IF.
- *|ELSE:|* and *|ELSEIF:NAME|* markers are not evaluated and are left
  as they are, as are placeholders with no matching value. A key mapped
  to None counts as missing.
"""

from __future__ import annotations

from typing import Mapping, Optional

from mergeguard.models import Occurrence, PlaceholderFormat, RenderedTemplate, Template
from mergeguard.scanner import scan


def _case_lookup(values: Optional[Mapping[str, str]]) -> dict[str, str]:
    lookup: dict[str, str] = {}
    for name, value in (values or {}).items():
        if value is None:
            continue
        lookup.setdefault(name, value)
        lookup.setdefault(name.upper(), value)
    return lookup


def _is_if(occ: Occurrence) -> bool:
    return occ.format is PlaceholderFormat.CONDITIONAL and occ.raw[2:5].upper() == "IF:"


def _is_end_if(occ: Occurrence) -> bool:
    return occ.format is PlaceholderFormat.CONDITIONAL and occ.raw.upper() == "*|END:IF|*"


def _truthy(merge_vars: Mapping[str, str], name: str) -> bool:
    return bool(merge_vars.get(name) or merge_vars.get(name.lower()))


def render(
    content: Optional[str],
    merge_vars: Optional[Mapping[str, str]] = None,
    global_vars: Optional[Mapping[str, str]] = None,
) -> str:
    """Fill placeholders in content with merge and global values.

    Args:
        content: Template text
        merge_vars: Per-recipient values by placeholder name
        global_vars: Values shared by all recipients, for *|GLOBAL:NAME|*

    Returns:
        Rendered text
    """
    content = content or ""
    merge_vars = merge_vars or {}
    merge_lookup = _case_lookup(merge_vars)
    global_lookup = _case_lookup(global_vars)

    occurrences = scan(content)
    out: list[str] = []
    cursor = 0
    i = 0
    while i < len(occurrences):
        occ = occurrences[i]

        if _is_if(occ):
            end_index = next(
                (j for j in range(i + 1, len(occurrences)) if _is_end_if(occurrences[j])),
                None,
            )
            if end_index is not None:
                out.append(content[cursor:occ.start])
                end = occurrences[end_index]
                if _truthy(merge_vars, occ.name):
                    # Keep the span content, drop the markers
                    cursor = occ.end
                    for inner in occurrences[i + 1:end_index]:
                        out.append(content[cursor:inner.start])
                        out.append(_substitute(inner, merge_vars, merge_lookup, global_lookup))
                        cursor = inner.end
                    out.append(content[cursor:end.start])
                cursor = end.end
                i = end_index + 1
                continue

        out.append(content[cursor:occ.start])
        out.append(_substitute(occ, merge_vars, merge_lookup, global_lookup))
        cursor = occ.end
        i += 1

    out.append(content[cursor:])
    return "".join(out)


def _substitute(
    occ: Occurrence,
    merge_vars: Mapping[str, str],
    merge_lookup: dict[str, str],
    global_lookup: dict[str, str],
) -> str:
    if occ.format is PlaceholderFormat.SIMPLE_VAR:
        value = merge_lookup.get(occ.name)
    elif occ.format is PlaceholderFormat.TEMPLATE_VAR:
        value = merge_vars.get(occ.name)
    elif occ.format is PlaceholderFormat.GLOBAL_VAR:
        value = global_lookup.get(occ.name)
    else:
        value = None
    # A None value counts as missing
    return occ.raw if value is None else str(value)


def render_template(
    template: Template,
    merge_vars: Optional[Mapping[str, str]] = None,
    global_vars: Optional[Mapping[str, str]] = None,
) -> RenderedTemplate:
    """Render the previewable fields of a template."""
    return RenderedTemplate(
        subject=render(template.subject, merge_vars, global_vars),
        from_name=render(template.from_name, merge_vars, global_vars),
        from_email=render(template.from_email, merge_vars, global_vars),
        html_content=render(template.code, merge_vars, global_vars),
        text_content=render(template.text, merge_vars, global_vars),
    )

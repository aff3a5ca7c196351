########## Template Binding ##########
# Binds named {{slot}} markers and guarantees nothing unresolved survives.

from __future__ import annotations

import re
from typing import Mapping

SLOT_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
LEFTOVER_PATTERN = re.compile(r"\{\{[^}]*\}\}")


class TemplateBindingError(KeyError):
    """Raised in strict mode when a template names a slot nobody supplied."""


def slots_in(template: str) -> set[str]:
    """Return the slot names a template expects."""

    return set(SLOT_PATTERN.findall(template))


def bind_template(template: str, slots: Mapping[str, object], strict: bool = True) -> str:
    """Fill {{name}} markers from the slot map."""

    # 1 Replace each marker from the map; strict mode refuses unknown names.   # steps
    # 2 Lenient mode drops unknown markers and closes the gap they leave.     # steps
    # 3 Drop anything still shaped like a marker so output stays clean.        # steps
    dropped: list[str] = []

    def _fill(match: re.Match) -> str:
        name = match.group(1)
        if name in slots:
            return str(slots[name])
        if strict:
            raise TemplateBindingError(name)
        dropped.append(name)
        return ""

    bound = SLOT_PATTERN.sub(_fill, template)
    if dropped:
        bound = tidy_spaces(bound)
    return strip_placeholders(bound)


def strip_placeholders(text: str) -> str:
    """Remove any leftover {{...}} markers and tidy doubled spaces."""

    if "{{" not in text:
        return text
    return tidy_spaces(LEFTOVER_PATTERN.sub("", text))


def tidy_spaces(text: str) -> str:
    return re.sub(r"[ \t]{2,}", " ", text).strip()

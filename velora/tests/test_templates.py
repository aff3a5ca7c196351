########## Template Tests ##########
# Checks typed slot binding and leftover marker cleanup.

from __future__ import annotations

import pytest

from velora.core.templates import TemplateBindingError, bind_template, slots_in, strip_placeholders


def test_bind_template_fills_named_slots() -> None:
    """Every supplied slot should be substituted."""

    bound = bind_template("Tell me about {{topic}}, {{ name }}.", {"topic": "the map", "name": "Ada"})
    assert bound == "Tell me about the map, Ada."


def test_strict_binding_raises_on_missing_slot() -> None:
    """Strict mode refuses a template naming an unknown slot."""

    with pytest.raises(TemplateBindingError):
        bind_template("Hello {{target}}", {})


def test_lenient_binding_drops_unknown_markers() -> None:
    """Non-strict binding leaves no marker behind."""

    bound = bind_template("Hello {{target}} friend", {}, strict=False)
    assert "{{" not in bound
    assert bound == "Hello friend"
    assert bind_template("Thanks {{target}}", {}, strict=False) == "Thanks"
    assert bind_template("Ready,  {{name}}", {"name": "Ada"}, strict=False) == "Ready,  Ada"


def test_strip_placeholders_and_slots_in() -> None:
    """Malformed markers are removed and slot discovery reads names."""

    assert strip_placeholders("Look {{ 9bad }} here") == "Look here"
    assert slots_in("{{a}} and {{b}} and {{a}}") == {"a", "b"}

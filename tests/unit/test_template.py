"""
Unit tests for dropdown template rendering.
"""

import pytest

from src.quizcore.template import (
    DropdownSelections,
    FieldSegment,
    MissingFieldSegment,
    TextSegment,
    find_placeholders,
    render_rich,
    render_template,
    unresolved_placeholders,
)


@pytest.fixture
def fields(dropdown):
    return dropdown.body.dropdown_data.dropdowns


class TestFindPlaceholders:
    """Test placeholder scanning."""

    def test_in_template_order(self):
        assert find_placeholders("The {a} jumped over the {b}") == ["a", "b"]

    def test_repeats_kept(self):
        assert find_placeholders("{x} and {x}") == ["x", "x"]

    def test_empty_template(self):
        assert find_placeholders("") == []

    def test_empty_braces_ignored(self):
        assert find_placeholders("Set {} = {}") == []


class TestRenderTemplate:
    """Test splitting a template into segments."""

    def test_text_and_fields_interleaved(self, fields):
        segments = render_template("The {a} jumped over the {b}", fields)

        assert [type(s) for s in segments] == [TextSegment, FieldSegment, TextSegment, FieldSegment]
        assert segments[0].text == "The "
        assert segments[1].field_id == "a"
        assert segments[2].text == " jumped over the "

    def test_unresolved_placeholder_marked(self, fields):
        """{c} is flagged while {a} and {b} still render as fields."""
        segments = render_template("The {a} jumped over the {b} and the {c}.", fields)

        assert [s.field_id for s in segments if isinstance(s, FieldSegment)] == ["a", "b"]
        missing = [s for s in segments if isinstance(s, MissingFieldSegment)]
        assert len(missing) == 1
        assert missing[0].token == "{c}"
        assert segments[-1].text == "."

    def test_selection_attached(self, fields):
        segments = render_template("{a}", fields, {"a": "fox"})
        assert segments == [FieldSegment(fields[0], "fox")]

    def test_unresolved_placeholders(self, fields):
        assert unresolved_placeholders("{a} {c} {d} {c}", fields) == ["c", "d"]


class TestDropdownSelections:
    """Test per-field selection state."""

    @pytest.fixture
    def selections(self, dropdown):
        return DropdownSelections(dropdown.body.dropdown_data)

    def test_select(self, selections):
        assert selections.select("a", "fox") is True
        assert selections.get("a") == "fox"
        assert selections.as_dict() == {"a": "fox"}

    def test_reselect_replaces(self, selections):
        selections.select("a", "fox")
        selections.select("a", "dog")
        assert selections.as_dict() == {"a": "dog"}

    def test_unknown_ids_ignored(self, selections):
        assert selections.select("z", "fox") is False
        assert selections.select("a", "fence") is False
        assert len(selections) == 0

    def test_clear(self, selections):
        selections.select("a", "fox")
        selections.clear("a")
        assert selections.get("a") is None

    def test_frozen(self, selections):
        selections.select("a", "fox")
        assert selections.freeze() == {"a": "fox"}
        assert selections.select("b", "fence") is False
        selections.clear("a")
        assert selections.as_dict() == {"a": "fox"}

    def test_initial_selections(self, dropdown):
        selections = DropdownSelections(dropdown.body.dropdown_data, {"a": "dog", "b": "nope"})
        assert selections.as_dict() == {"a": "dog"}


class TestRenderRich:
    """Test terminal rendering."""

    def test_plain_text(self, fields):
        segments = render_template("The {a} jumped over the {b}", fields, {"a": "fox"})
        text = render_rich(segments, "en")

        assert text.plain == "The [Animal: fox] jumped over the [Obstacle: ____]"

    def test_localized_labels(self, fields):
        text = render_rich(render_template("{a}", fields), "sl")
        assert text.plain == "[Žival: ____]"

    def test_missing_field(self, fields):
        text = render_rich(render_template("{c}", fields), "en")
        assert text.plain == "[Missing dropdown: c]"

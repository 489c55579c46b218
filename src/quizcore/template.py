"""
Dropdown template rendering.

A DROPDOWN prompt is a template such as "The {a} jumped over the {b}".
Rendering splits it into literal text and one segment per placeholder.
Placeholders that name a known field become interactive FieldSegments;
unknown ones become MissingFieldSegments so a broken template is visibly
broken instead of silently losing a field.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from rich.text import Text

from .localization import localized
from .types import DropdownData, DropdownField

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


@dataclass
class TextSegment:
    text: str


@dataclass
class FieldSegment:
    field: DropdownField
    selected_option_id: str | None = None

    @property
    def field_id(self) -> str:
        return self.field.id


@dataclass
class MissingFieldSegment:
    """Placeholder with no matching dropdown field (authoring error marker)."""
    field_id: str

    @property
    def token(self) -> str:
        return "{" + self.field_id + "}"


Segment = Union[TextSegment, FieldSegment, MissingFieldSegment]


def find_placeholders(template: str) -> list[str]:
    """Placeholder ids in template order (repeats kept)."""
    return PLACEHOLDER_PATTERN.findall(template or "")


def unresolved_placeholders(template: str, fields: Iterable[DropdownField]) -> list[str]:
    """Placeholder ids with no matching field, first occurrence only."""
    known = {f.id for f in fields}
    return list(dict.fromkeys(p for p in find_placeholders(template) if p not in known))


def render_template(
    template: str,
    fields: Iterable[DropdownField],
    selections: Mapping[str, str] | None = None,
) -> list[Segment]:
    """Interleave literal text with field segments."""
    by_id = {f.id: f for f in fields}
    selections = selections or {}
    segments: list[Segment] = []

    last_end = 0
    for match in PLACEHOLDER_PATTERN.finditer(template or ""):
        if match.start() > last_end:
            segments.append(TextSegment(template[last_end:match.start()]))

        field_id = match.group(1)
        field = by_id.get(field_id)
        if field is None:
            segments.append(MissingFieldSegment(field_id))
        else:
            segments.append(FieldSegment(field, selections.get(field_id)))
        last_end = match.end()

    if last_end < len(template or ""):
        segments.append(TextSegment(template[last_end:]))

    return segments


class DropdownSelections:
    """
    Per-field selections for one DROPDOWN question: field id -> option id.

    Independent of template parsing; only ids that exist in the question's
    dropdown data are accepted.
    """

    def __init__(self, data: DropdownData, initial: Mapping[str, str] | None = None):
        self._data = data
        self._selected: dict[str, str] = {}
        self.frozen = False
        for field_id, option_id in (initial or {}).items():
            self.select(field_id, option_id)

    def select(self, field_id: str, option_id: str) -> bool:
        """Select an option; unknown field or option ids are ignored."""
        if self.frozen:
            return False
        field = self._data.field(field_id)
        if field is None or field.option(option_id) is None:
            return False
        self._selected[field_id] = option_id
        return True

    def clear(self, field_id: str) -> None:
        if self.frozen:
            return
        self._selected.pop(field_id, None)

    def get(self, field_id: str) -> str | None:
        return self._selected.get(field_id)

    def as_dict(self) -> dict[str, str]:
        return dict(self._selected)

    def freeze(self) -> dict[str, str]:
        self.frozen = True
        return self.as_dict()

    def __len__(self) -> int:
        return len(self._selected)


def render_rich(segments: Iterable[Segment], language: str | None = None) -> Text:
    """Format segments for the terminal: fields as [label: choice], errors in red."""
    result = Text()
    for segment in segments:
        if isinstance(segment, TextSegment):
            result.append(segment.text)
        elif isinstance(segment, FieldSegment):
            label = localized(segment.field, "label", language) or segment.field_id
            option = segment.field.option(segment.selected_option_id or "")
            choice = localized(option, "text", language) if option else "____"
            result.append(f"[{label}: {choice}]", style="bold cyan")
        else:
            result.append(f"[Missing dropdown: {segment.field_id}]", style="bold red")
    return result

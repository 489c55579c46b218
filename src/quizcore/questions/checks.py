"""
Authoring checks shared by several question types.
"""

from __future__ import annotations

from collections.abc import Sequence

from config import Settings

from ..types import ImageContent, ItemContent, MixedContent, Option, TextContent
from .base import RequirementTally


def is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def check_choice_options(options: Sequence[Option], tally: RequirementTally, settings: Settings) -> None:
    """Option count and option texts (two requirements)."""
    if not tally.check(len(options) >= settings.choice_min_options, missing="Answer options"):
        tally.check(False)
        return

    blank_indexes = [i for i, option in enumerate(options) if is_blank(option.text)]
    for i in blank_indexes:
        tally.missing_fields.append(f"Option {i + 1} text")
    tally.check(not blank_indexes)


def check_item_content(
    content: ItemContent | None,
    tally: RequirementTally,
    label: str,
) -> bool:
    """One requirement: the content payload is filled in for its declared type."""
    if content is None:
        return tally.check(False, missing=f"{label} content")

    if isinstance(content, TextContent):
        return tally.check(not is_blank(content.text), missing=f"{label} text")

    if isinstance(content, ImageContent):
        if is_blank(content.image_url):
            return tally.check(False, missing=f"{label} image URL")
        return tally.check(not is_blank(content.alt_text), missing=f"{label} alt text")

    if isinstance(content, MixedContent):
        has_either = not is_blank(content.text) or not is_blank(content.image_url)
        return tally.check(has_either, missing=f"{label} text or image")

    return tally.check(False, missing=f"{label} content")


def is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def check_sequential(
    positions: Sequence[int],
    tally: RequirementTally,
    field: str,
    label: str = "Positions",
) -> bool:
    """Positions must be exactly 1..N with no gap or duplicate."""
    for expected, actual in enumerate(sorted(positions), start=1):
        if actual != expected:
            tally.add_error(
                field,
                f"{label} must be sequential starting from 1. Found gap at position {expected}",
            )
            return False
    return True

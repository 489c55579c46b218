"""
Typed question builders.

One fluent builder per question type, so authoring code sets fields through
methods that only exist for that type instead of poking at field paths:

    question = (
        OrderingBuilder("Order the planets by distance from the sun")
        .instructions("Drag the planets into place")
        .item("Mercury")
        .item("Venus")
        .item("Earth")
        .build()
    )

build() always returns a Question, complete or not; run validate_question()
on it to see what is still missing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .types import (
    CorrectMatch,
    DropdownBody,
    DropdownData,
    DropdownField,
    DropdownScoring,
    ImageContent,
    InputType,
    MatchingBody,
    MatchingData,
    MatchingItem,
    MatchingScoring,
    MixedContent,
    MultipleChoiceBody,
    MultipleChoiceData,
    Option,
    OrderingBody,
    OrderingData,
    OrderingItem,
    PartialCreditRules,
    Question,
    ScoringMethod,
    SingleChoiceBody,
    TextContent,
    TextInputBody,
    TextInputData,
    new_id,
)


def _localized(field: str, value: str, language: str | None) -> dict[str, str]:
    """{field: value}, or {field_<lang>: value} for a translation."""
    if language and language != "en":
        return {f"{field}_{language}": value}
    return {field: value}


def make_content(
    text: str | None = None,
    image_url: str | None = None,
    alt_text: str | None = None,
) -> TextContent | ImageContent | MixedContent:
    """Pick the content variant from what is given."""
    if image_url and text:
        return MixedContent(text=text, image_url=image_url)
    if image_url:
        return ImageContent(image_url=image_url, alt_text=alt_text or "")
    return TextContent(text=text or "")


class QuestionBuilder(ABC):
    """Shared envelope: id, prompt text and its translations, image."""

    def __init__(self, text: str = "", question_id: str | None = None):
        self._envelope: dict[str, Any] = {"id": question_id or new_id(), "text": text}

    def text(self, text: str, language: str | None = None) -> QuestionBuilder:
        """Set the prompt, or one of its translations."""
        self._envelope.update(_localized("text", text, language))
        return self

    def image(self, url: str) -> QuestionBuilder:
        self._envelope["image_url"] = url
        return self

    @abstractmethod
    def _body(self):
        """Type-specific payload for build()."""

    def build(self) -> Question:
        return Question(**self._envelope, body=self._body())


# =============================================================================
# Choice questions
# =============================================================================


class _ChoiceBuilder(QuestionBuilder):
    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._options: list[Option] = []

    def option(
        self,
        text: str,
        correct: bool = False,
        option_id: str | None = None,
        **translations: str,
    ) -> _ChoiceBuilder:
        """Append an option; translations as sl="...", hr="..."."""
        extra = {f"text_{lang}": value for lang, value in translations.items()}
        self._options.append(
            Option(id=option_id or new_id(), text=text, is_correct=correct, **extra)
        )
        return self

    @property
    def option_ids(self) -> list[str]:
        return [o.id for o in self._options]


class SingleChoiceBuilder(_ChoiceBuilder):
    """Builder for SINGLE_CHOICE questions."""

    def mark_correct(self, option_id: str) -> SingleChoiceBuilder:
        """Make option_id the one correct option."""
        for option in self._options:
            option.is_correct = option.id == option_id
        return self

    def _body(self) -> SingleChoiceBody:
        return SingleChoiceBody(options=[o.model_copy() for o in self._options])


class MultipleChoiceBuilder(_ChoiceBuilder):
    """Builder for MULTIPLE_CHOICE questions."""

    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._data = MultipleChoiceData()

    def selections(self, minimum: int = 1, maximum: int | None = None) -> MultipleChoiceBuilder:
        """Bound how many options the student may pick."""
        self._data.min_selections = minimum
        self._data.max_selections = maximum
        return self

    def partial_credit(
        self,
        points: float = 1.0,
        penalty: float = 0.0,
        min_score: float = 0.0,
    ) -> MultipleChoiceBuilder:
        """Switch to partial credit scoring."""
        self._data.scoring_method = ScoringMethod.PARTIAL_CREDIT
        self._data.partial_credit_rules = PartialCreditRules(
            correct_selection_points=points,
            incorrect_selection_penalty=penalty,
            min_score=min_score,
        )
        return self

    def all_or_nothing(self) -> MultipleChoiceBuilder:
        self._data.scoring_method = ScoringMethod.ALL_OR_NOTHING
        self._data.partial_credit_rules = None
        return self

    def _body(self) -> MultipleChoiceBody:
        return MultipleChoiceBody(
            options=[o.model_copy() for o in self._options],
            multiple_choice_data=self._data.model_copy(),
        )


# =============================================================================
# Text input
# =============================================================================


class TextInputBuilder(QuestionBuilder):
    """Builder for TEXT_INPUT questions."""

    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._data = TextInputData()

    def accept(self, *answers: str) -> TextInputBuilder:
        """Add acceptable answers."""
        self._data.acceptable_answers.extend(answers)
        return self

    def case_sensitive(self, enabled: bool = True) -> TextInputBuilder:
        self._data.case_sensitive = enabled
        return self

    def numeric(self, tolerance: float = 0.0) -> TextInputBuilder:
        """Compare answers as numbers within tolerance."""
        self._data.input_type = InputType.NUMBER
        self._data.numeric_tolerance = tolerance
        return self

    def input_type(self, input_type: InputType | str) -> TextInputBuilder:
        self._data.input_type = InputType(input_type)
        return self

    def placeholder(self, text: str, language: str | None = None) -> TextInputBuilder:
        for key, value in _localized("placeholder", text, language).items():
            setattr(self._data, key, value)
        return self

    def _body(self) -> TextInputBody:
        return TextInputBody(text_input_data=self._data.model_copy(deep=True))


# =============================================================================
# Dropdown
# =============================================================================


class DropdownBuilder(QuestionBuilder):
    """Builder for DROPDOWN questions."""

    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._template: dict[str, str] = {"template": ""}
        self._fields: list[DropdownField] = []
        self._scoring = DropdownScoring()

    def template(self, template: str, language: str | None = None) -> DropdownBuilder:
        """Set the template; reference fields as {fieldId}."""
        self._template.update(_localized("template", template, language))
        return self

    def field(
        self,
        field_id: str,
        label: str,
        options: Sequence[str],
        correct: str | Sequence[str],
    ) -> DropdownBuilder:
        """Add a dropdown field; correct names the correct option text(s)."""
        correct_texts = {correct} if isinstance(correct, str) else set(correct)
        self._fields.append(DropdownField(
            id=field_id,
            label=label,
            options=[
                Option(id=f"{field_id}-{i + 1}", text=text, is_correct=text in correct_texts)
                for i, text in enumerate(options)
            ],
        ))
        return self

    def scoring(
        self,
        points_per_dropdown: float = 1.0,
        require_all_correct: bool = True,
        penalize_incorrect: bool = False,
    ) -> DropdownBuilder:
        self._scoring = DropdownScoring(
            points_per_dropdown=points_per_dropdown,
            require_all_correct=require_all_correct,
            penalize_incorrect=penalize_incorrect,
        )
        return self

    def _body(self) -> DropdownBody:
        return DropdownBody(dropdown_data=DropdownData(
            **self._template,
            dropdowns=[f.model_copy(deep=True) for f in self._fields],
            scoring=self._scoring.model_copy(),
        ))


# =============================================================================
# Ordering
# =============================================================================


class OrderingBuilder(QuestionBuilder):
    """Builder for ORDERING questions. Items are added in their correct order."""

    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._instructions: dict[str, str] = {"instructions": ""}
        self._items: list[OrderingItem] = []
        self._partial_credit = False

    def instructions(self, text: str, language: str | None = None) -> OrderingBuilder:
        self._instructions.update(_localized("instructions", text, language))
        return self

    def item(
        self,
        text: str | None = None,
        image_url: str | None = None,
        alt_text: str | None = None,
        item_id: str | None = None,
    ) -> OrderingBuilder:
        """Append an item at the next correct position."""
        self._items.append(OrderingItem(
            id=item_id or new_id(),
            content=make_content(text, image_url, alt_text),
            correct_position=len(self._items) + 1,
        ))
        return self

    def allow_partial_credit(self, enabled: bool = True) -> OrderingBuilder:
        self._partial_credit = enabled
        return self

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self._items]

    def _body(self) -> OrderingBody:
        return OrderingBody(ordering_data=OrderingData(
            **self._instructions,
            items=[item.model_copy(deep=True) for item in self._items],
            allow_partial_credit=self._partial_credit,
            exact_order_required=not self._partial_credit,
        ))


# =============================================================================
# Matching
# =============================================================================


class MatchingBuilder(QuestionBuilder):
    """Builder for MATCHING questions."""

    def __init__(self, text: str = "", question_id: str | None = None):
        super().__init__(text, question_id)
        self._instructions: dict[str, str] = {"instructions": ""}
        self._left: list[MatchingItem] = []
        self._right: list[MatchingItem] = []
        self._matches: list[CorrectMatch] = []
        self._scoring = MatchingScoring()

    def instructions(self, text: str, language: str | None = None) -> MatchingBuilder:
        self._instructions.update(_localized("instructions", text, language))
        return self

    def left(
        self,
        text: str | None = None,
        item_id: str | None = None,
        image_url: str | None = None,
        alt_text: str | None = None,
    ) -> MatchingBuilder:
        self._left.append(MatchingItem(
            id=item_id or new_id(),
            position=len(self._left) + 1,
            content=make_content(text, image_url, alt_text),
        ))
        return self

    def right(
        self,
        text: str | None = None,
        item_id: str | None = None,
        image_url: str | None = None,
        alt_text: str | None = None,
    ) -> MatchingBuilder:
        self._right.append(MatchingItem(
            id=item_id or new_id(),
            position=len(self._right) + 1,
            content=make_content(text, image_url, alt_text),
        ))
        return self

    def match(self, left_id: str, right_id: str, explanation: str | None = None) -> MatchingBuilder:
        self._matches.append(CorrectMatch(left_id=left_id, right_id=right_id, explanation=explanation))
        return self

    def pair(self, left_text: str, right_text: str) -> MatchingBuilder:
        """Add a left and a right item and mark them as a correct match."""
        self.left(left_text).right(right_text)
        return self.match(self._left[-1].id, self._right[-1].id)

    def scoring(
        self,
        points_per_match: float = 1.0,
        penalize_incorrect: bool = False,
        penalty_per_incorrect: float = 0.0,
        require_all_matches: bool = True,
        partial_credit: bool = False,
    ) -> MatchingBuilder:
        self._scoring = MatchingScoring(
            points_per_match=points_per_match,
            penalize_incorrect=penalize_incorrect,
            penalty_per_incorrect=penalty_per_incorrect,
            require_all_matches=require_all_matches,
            partial_credit=partial_credit,
        )
        return self

    def _body(self) -> MatchingBody:
        return MatchingBody(matching_data=MatchingData(
            **self._instructions,
            left_items=[item.model_copy(deep=True) for item in self._left],
            right_items=[item.model_copy(deep=True) for item in self._right],
            correct_matches=list(self._matches),
            scoring=self._scoring.model_copy(),
        ))

"""
Question and answer data model.

A Question carries a shared envelope (id, localized prompt, optional image)
and exactly one type-specific body. The body is a discriminated union keyed
by question_type, so a SINGLE_CHOICE question can never carry ordering data.

Stored records are flat camelCase JSON:

    {"id": "q1", "text": "...", "text_sl": "...", "questionType": "ORDERING",
     "orderingData": {"instructions": "...", "items": [...]}}

Question.from_record() folds the payload into the tagged body and
Question.to_record() flattens it back, emitting only the payload that
belongs to the question's type.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import QuestionRecordError

# Suffixes of the parallel localized fields (text_sl, altText_hr, ...)
LOCALIZED_SUFFIXES = frozenset({"sl", "hr"})


def record_alias(field_name: str) -> str:
    """
    Map a snake_case attribute to its record key.

    image_url -> imageUrl, but alt_text_sl -> altText_sl: the language
    suffix stays separated by an underscore.
    """
    base, sep, suffix = field_name.rpartition("_")
    if sep and base and suffix in LOCALIZED_SUFFIXES:
        return f"{to_camel(base)}_{suffix}"
    return to_camel(field_name)


def new_id() -> str:
    """Short random id for options and questions created by an author."""
    return uuid4().hex[:12]


class RecordModel(BaseModel):
    """Base for every stored shape: camelCase keys, unknown languages kept."""

    model_config = ConfigDict(
        alias_generator=record_alias,
        populate_by_name=True,
        extra="allow",
    )

    def to_record(self) -> dict[str, Any]:
        """Dump in the stored (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Enums
# =============================================================================


class QuestionType(str, Enum):
    """Supported question types."""
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TEXT_INPUT = "TEXT_INPUT"
    DROPDOWN = "DROPDOWN"
    ORDERING = "ORDERING"
    MATCHING = "MATCHING"


class ScoringMethod(str, Enum):
    """Multiple choice scoring."""
    ALL_OR_NOTHING = "ALL_OR_NOTHING"
    PARTIAL_CREDIT = "PARTIAL_CREDIT"


class InputType(str, Enum):
    """Expected format of a free-text answer."""
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    URL = "url"


# =============================================================================
# Choice options
# =============================================================================


class Option(RecordModel):
    """A selectable answer with a correctness flag."""
    id: str = Field(default_factory=new_id)
    text: str = ""
    text_sl: str | None = None
    text_hr: str | None = None
    is_correct: bool = False


class PartialCreditRules(RecordModel):
    correct_selection_points: float = 1.0
    incorrect_selection_penalty: float = 0.0
    min_score: float = 0.0


class MultipleChoiceData(RecordModel):
    scoring_method: ScoringMethod = ScoringMethod.ALL_OR_NOTHING
    min_selections: int = 1
    max_selections: int | None = None
    partial_credit_rules: PartialCreditRules | None = None

    @property
    def rules(self) -> PartialCreditRules:
        """Partial credit rules, falling back to 1 point per correct pick."""
        return self.partial_credit_rules or PartialCreditRules()


# =============================================================================
# Text input
# =============================================================================


class TextInputData(RecordModel):
    acceptable_answers: list[str] = Field(default_factory=list)
    case_sensitive: bool = False
    input_type: InputType = InputType.TEXT
    numeric_tolerance: float | None = None
    placeholder: str | None = None
    placeholder_sl: str | None = None
    placeholder_hr: str | None = None


# =============================================================================
# Dropdown
# =============================================================================


class DropdownField(RecordModel):
    """One selection field, referenced from the template as {id}."""
    id: str = ""
    label: str = ""
    label_sl: str | None = None
    label_hr: str | None = None
    options: list[Option] = Field(default_factory=list)

    def option(self, option_id: str) -> Option | None:
        return next((o for o in self.options if o.id == option_id), None)


class DropdownScoring(RecordModel):
    points_per_dropdown: float = 1.0
    require_all_correct: bool = True
    penalize_incorrect: bool = False


class DropdownData(RecordModel):
    template: str = ""
    template_sl: str | None = None
    template_hr: str | None = None
    dropdowns: list[DropdownField] = Field(default_factory=list)
    scoring: DropdownScoring = Field(default_factory=DropdownScoring)

    def field(self, field_id: str) -> DropdownField | None:
        return next((d for d in self.dropdowns if d.id == field_id), None)


# =============================================================================
# Ordering and matching items
# =============================================================================


class TextContent(RecordModel):
    type: Literal["text"] = "text"
    text: str = ""
    text_sl: str | None = None
    text_hr: str | None = None


class ImageContent(RecordModel):
    type: Literal["image"] = "image"
    image_url: str = ""
    alt_text: str = ""
    alt_text_sl: str | None = None
    alt_text_hr: str | None = None


class MixedContent(RecordModel):
    type: Literal["mixed"] = "mixed"
    text: str | None = None
    text_sl: str | None = None
    text_hr: str | None = None
    image_url: str | None = None
    suffix: str | None = None
    suffix_sl: str | None = None
    suffix_hr: str | None = None


ItemContent = Annotated[
    Union[TextContent, ImageContent, MixedContent],
    Field(discriminator="type"),
]


class OrderingItem(RecordModel):
    id: str = ""
    content: ItemContent | None = None
    correct_position: int | None = None


class OrderingData(RecordModel):
    instructions: str = ""
    instructions_sl: str | None = None
    instructions_hr: str | None = None
    items: list[OrderingItem] = Field(default_factory=list)
    allow_partial_credit: bool = False
    exact_order_required: bool = True

    def correct_order(self) -> list[str]:
        """Item ids sorted by their authored position."""
        ranked = sorted(
            self.items,
            key=lambda item: item.correct_position if item.correct_position is not None else 0,
        )
        return [item.id for item in ranked]


class MatchingItem(RecordModel):
    id: str = ""
    position: int | None = None
    content: ItemContent | None = None


class Connection(RecordModel):
    """A left-to-right pairing, as recorded by a student or an author."""

    model_config = ConfigDict(frozen=True)

    left_id: str
    right_id: str


class CorrectMatch(Connection):
    explanation: str | None = None
    explanation_sl: str | None = None
    explanation_hr: str | None = None


class MatchingScoring(RecordModel):
    points_per_match: float = 1.0
    penalize_incorrect: bool = False
    penalty_per_incorrect: float = 0.0
    require_all_matches: bool = True
    partial_credit: bool = False


class MatchingData(RecordModel):
    instructions: str = ""
    instructions_sl: str | None = None
    instructions_hr: str | None = None
    left_items: list[MatchingItem] = Field(default_factory=list)
    right_items: list[MatchingItem] = Field(default_factory=list)
    correct_matches: list[CorrectMatch] = Field(default_factory=list)
    scoring: MatchingScoring = Field(default_factory=MatchingScoring)


# =============================================================================
# Question bodies (one per type)
# =============================================================================


class SingleChoiceBody(RecordModel):
    question_type: Literal["SINGLE_CHOICE"] = "SINGLE_CHOICE"
    options: list[Option] = Field(default_factory=list)


class MultipleChoiceBody(RecordModel):
    question_type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    options: list[Option] = Field(default_factory=list)
    multiple_choice_data: MultipleChoiceData = Field(default_factory=MultipleChoiceData)


class TextInputBody(RecordModel):
    question_type: Literal["TEXT_INPUT"] = "TEXT_INPUT"
    text_input_data: TextInputData | None = None


class DropdownBody(RecordModel):
    question_type: Literal["DROPDOWN"] = "DROPDOWN"
    dropdown_data: DropdownData | None = None


class OrderingBody(RecordModel):
    question_type: Literal["ORDERING"] = "ORDERING"
    ordering_data: OrderingData | None = None


class MatchingBody(RecordModel):
    question_type: Literal["MATCHING"] = "MATCHING"
    matching_data: MatchingData | None = None


QuestionBody = Annotated[
    Union[
        SingleChoiceBody,
        MultipleChoiceBody,
        TextInputBody,
        DropdownBody,
        OrderingBody,
        MatchingBody,
    ],
    Field(discriminator="question_type"),
]

# Record key of each payload, keyed by every spelling accepted on input
_PAYLOAD_KEYS = {
    "options": "options",
    "multipleChoiceData": "multipleChoiceData",
    "multiple_choice_data": "multipleChoiceData",
    "textInputData": "textInputData",
    "text_input_data": "textInputData",
    "dropdownData": "dropdownData",
    "dropdown_data": "dropdownData",
    "orderingData": "orderingData",
    "ordering_data": "orderingData",
    "matchingData": "matchingData",
    "matching_data": "matchingData",
}

# Payloads that belong to each type; anything else in a record is dropped
_TYPE_PAYLOADS = {
    QuestionType.SINGLE_CHOICE: {"options"},
    QuestionType.MULTIPLE_CHOICE: {"options", "multipleChoiceData"},
    QuestionType.TEXT_INPUT: {"textInputData"},
    QuestionType.DROPDOWN: {"dropdownData"},
    QuestionType.ORDERING: {"orderingData"},
    QuestionType.MATCHING: {"matchingData"},
}


class Question(RecordModel):
    """A quiz question: shared envelope plus one type-specific body."""

    id: str = Field(default_factory=new_id)
    text: str = ""
    text_sl: str | None = None
    text_hr: str | None = None
    image_url: str | None = None
    body: QuestionBody = Field(default_factory=SingleChoiceBody)

    @model_validator(mode="before")
    @classmethod
    def _fold_payload(cls, data: Any) -> Any:
        """Turn a flat stored record into envelope + tagged body."""
        if not isinstance(data, dict) or "body" in data:
            return data

        data = dict(data)
        raw_type = data.pop("questionType", None) or data.pop("question_type", None)
        raw_type = getattr(raw_type, "value", raw_type) or QuestionType.SINGLE_CHOICE.value
        try:
            allowed = _TYPE_PAYLOADS[QuestionType(raw_type)]
        except ValueError:
            # Let the discriminator report the bad tag
            allowed = set()

        body: dict[str, Any] = {"questionType": raw_type}
        for key in list(data):
            record_key = _PAYLOAD_KEYS.get(key)
            if record_key is None:
                continue
            value = data.pop(key)
            if record_key in allowed and value is not None:
                body[record_key] = value
        data["body"] = body
        return data

    @property
    def question_type(self) -> QuestionType:
        return QuestionType(self.body.question_type)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Question":
        """Parse a stored record, raising QuestionRecordError if malformed."""
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            raise QuestionRecordError(str(e), record_id=record_id) from e

    def to_record(self) -> dict[str, Any]:
        """Flatten to the stored shape with only this type's payload."""
        record = super().to_record()
        record.update(record.pop("body"))
        return record


class Quiz(RecordModel):
    """A titled list of questions."""

    id: str = Field(default_factory=new_id)
    title: str = ""
    title_sl: str | None = None
    title_hr: str | None = None
    description: str | None = None
    description_sl: str | None = None
    description_hr: str | None = None
    teacher_id: str | None = None
    questions: list[Question] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Quiz":
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            raise QuestionRecordError(str(e), record_id=record_id) from e

    def to_record(self) -> dict[str, Any]:
        record = super().to_record()
        record["questions"] = [q.to_record() for q in self.questions]
        return record

    def question(self, question_id: str) -> Question | None:
        return next((q for q in self.questions if q.id == question_id), None)


# What a student submits for one question, by type:
#   SINGLE_CHOICE / TEXT_INPUT -> str
#   MULTIPLE_CHOICE / ORDERING -> list[str]
#   DROPDOWN                   -> dict[field_id, option_id]
#   MATCHING                   -> list[Connection]
Answer = Union[str, list[str], dict[str, str], list[Connection], None]

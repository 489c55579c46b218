"""
Unit tests for authoring validation.

Covers requirement counting, the missing-vs-error split and the status
priority (error > complete > partial > incomplete) for every question type.
"""

import pytest

from config import Settings
from src.quizcore.questions.base import RequirementTally
from src.quizcore.types import (
    DropdownBody,
    InputType,
    Option,
    OrderingBody,
    Question,
    SingleChoiceBody,
    TextInputBody,
)
from src.quizcore.validation import (
    ValidationStatus,
    is_question_complete,
    question_validation_summary,
    validate_question,
    validate_quiz,
)


def messages(result):
    return [e.message for e in result.errors]


class TestRequirementTally:
    """Test the requirement counter."""

    def test_percentage_rounds_half_up(self):
        tally = RequirementTally(total=8, met=5)
        assert tally.percentage == 63

    def test_empty_tally_is_zero(self):
        assert RequirementTally().percentage == 0

    def test_check_records_missing_and_error(self):
        tally = RequirementTally()
        assert tally.check(False, missing="Thing", field="thing", error="Thing is wrong") is False

        assert tally.total == 1
        assert tally.met == 0
        assert tally.missing_fields == ["Thing"]
        assert tally.errors[0].to_dict() == {"field": "thing", "message": "Thing is wrong"}


class TestCompleteQuestions:
    """Every fixture question is fully authored."""

    @pytest.mark.parametrize(
        "fixture",
        ["single_choice", "multiple_choice", "text_input", "dropdown", "ordering", "matching"],
    )
    def test_fixture_is_complete(self, request, fixture):
        result = validate_question(request.getfixturevalue(fixture))

        assert result.status == ValidationStatus.COMPLETE, result.to_dict()
        assert result.completion_percentage == 100
        assert result.is_complete
        assert result.errors == []
        assert result.missing_fields == []

    def test_is_question_complete(self, dropdown):
        assert is_question_complete(dropdown) is True


class TestSingleChoiceValidation:
    """Test single choice rules."""

    def test_empty_question_has_no_correct_option(self):
        """No options means no correct option, which is already an error."""
        result = validate_question(Question(text="", body=SingleChoiceBody()))

        assert result.status == ValidationStatus.ERROR
        assert result.completion_percentage == 0
        assert "Question text" in result.missing_fields
        assert "Answer options" in result.missing_fields
        assert "Correct answer selection" in result.missing_fields

    @pytest.mark.parametrize("correct_count", [0, 2, 3])
    def test_error_unless_exactly_one_correct(self, single_choice, correct_count):
        for i, option in enumerate(single_choice.body.options):
            option.is_correct = i < correct_count

        result = validate_question(single_choice)

        assert result.status == ValidationStatus.ERROR
        assert "Exactly one option must be marked as correct for single choice questions" in messages(result)

    def test_two_correct_is_error_at_75_percent(self, single_choice):
        single_choice.body.options[1].is_correct = True
        result = validate_question(single_choice)

        assert result.status == ValidationStatus.ERROR
        assert result.completion_percentage == 75

    def test_blank_option_text_is_missing(self, single_choice):
        single_choice.body.options[2].text = "  "
        result = validate_question(single_choice)

        assert result.status == ValidationStatus.PARTIAL
        assert "Option 3 text" in result.missing_fields


class TestMultipleChoiceValidation:
    """Test multiple choice rules."""

    def test_no_correct_option_is_error(self, multiple_choice):
        for option in multiple_choice.body.options:
            option.is_correct = False
        result = validate_question(multiple_choice)

        assert result.status == ValidationStatus.ERROR
        assert "Correct answer selections" in result.missing_fields

    def test_max_selections_above_option_count(self, multiple_choice):
        multiple_choice.body.multiple_choice_data.max_selections = 5
        result = validate_question(multiple_choice)

        assert "Maximum selections cannot exceed number of options" in messages(result)

    def test_min_above_max(self, multiple_choice):
        data = multiple_choice.body.multiple_choice_data
        data.min_selections = 3
        data.max_selections = 2
        result = validate_question(multiple_choice)

        assert "Minimum selections cannot exceed maximum selections" in messages(result)

    def test_positive_penalty_is_error(self, multiple_choice):
        multiple_choice.body.multiple_choice_data.partial_credit_rules.incorrect_selection_penalty = 0.5
        result = validate_question(multiple_choice)

        assert result.status == ValidationStatus.ERROR
        assert "Incorrect selection penalty must be non-positive" in messages(result)


class TestTextInputValidation:
    """Test text input rules."""

    def test_empty_question_is_incomplete(self):
        result = validate_question(Question(text="", body=TextInputBody()))

        assert result.status == ValidationStatus.INCOMPLETE
        assert result.completion_percentage == 0
        assert result.errors == []
        assert result.missing_fields == ["Question text", "Text input configuration"]

    def test_missing_configuration(self):
        result = validate_question(Question(text="Name it", body=TextInputBody()))

        assert result.status == ValidationStatus.PARTIAL
        assert result.completion_percentage == 33
        assert "Text input configuration" in result.missing_fields

    def test_no_answers_is_missing(self, text_input):
        text_input.body.text_input_data.acceptable_answers = []
        result = validate_question(text_input)

        assert result.status == ValidationStatus.PARTIAL
        assert "Acceptable answers" in result.missing_fields

    def test_blank_answer_is_error(self, text_input):
        text_input.body.text_input_data.acceptable_answers.append(" ")
        result = validate_question(text_input)

        assert result.status == ValidationStatus.ERROR
        assert "Acceptable answers cannot be empty" in messages(result)

    def test_non_numeric_answer_for_number_input(self, text_input):
        text_input.body.text_input_data.input_type = InputType.NUMBER
        result = validate_question(text_input)

        assert result.status == ValidationStatus.ERROR
        assert "Acceptable answer 1 is not a number" in messages(result)


class TestDropdownValidation:
    """Test dropdown rules."""

    def test_missing_configuration(self):
        result = validate_question(Question(text="Fill in", body=DropdownBody()))

        assert result.status == ValidationStatus.PARTIAL
        assert result.completion_percentage == 25
        assert "Dropdown configuration" in result.missing_fields

    def test_unresolved_placeholder_is_error(self, dropdown):
        dropdown.body.dropdown_data.template = "The {a} jumped over the {b} and the {c}"
        result = validate_question(dropdown)

        assert result.status == ValidationStatus.ERROR
        assert result.completion_percentage == 100
        assert any("{c}" in m for m in messages(result))

    def test_unreferenced_field_is_error(self, dropdown):
        dropdown.body.dropdown_data.template = "The {a} jumped"
        result = validate_question(dropdown)

        assert result.status == ValidationStatus.ERROR
        assert "Dropdown 2 is not used in the template" in messages(result)

    def test_duplicate_field_id(self, dropdown):
        dropdown.body.dropdown_data.dropdowns[1].id = "a"
        result = validate_question(dropdown)

        assert "Duplicate dropdown id 'a'" in messages(result)

    def test_field_needs_two_options_and_a_correct_one(self, dropdown):
        field = dropdown.body.dropdown_data.dropdowns[0]
        field.options = [Option(id="x", text="cat", is_correct=False)]
        result = validate_question(dropdown)

        assert result.status == ValidationStatus.PARTIAL
        assert "Dropdown 1 options" in result.missing_fields
        assert "Dropdown 1 correct answer" in result.missing_fields

    def test_too_many_fields(self, dropdown):
        settings = Settings(dropdown_max_fields=1)
        result = validate_question(dropdown, settings)

        assert "Maximum 1 dropdowns allowed" in messages(result)

    @pytest.mark.parametrize("points", [0, -1])
    def test_points_per_dropdown_must_be_positive(self, dropdown, points):
        dropdown.body.dropdown_data.scoring.points_per_dropdown = points
        result = validate_question(dropdown)

        assert result.status == ValidationStatus.ERROR
        assert "Points per dropdown must be positive" in messages(result)


class TestOrderingValidation:
    """Test ordering rules."""

    def test_gap_in_positions_is_error_at_100_percent(self, ordering):
        ordering.body.ordering_data.items[0].correct_position = 4
        result = validate_question(ordering)

        assert result.status == ValidationStatus.ERROR
        assert result.completion_percentage == 100
        assert "Positions must be sequential starting from 1. Found gap at position 3" in messages(result)

    def test_duplicate_positions_is_error(self, ordering):
        ordering.body.ordering_data.items[0].correct_position = 1
        result = validate_question(ordering)

        assert result.status == ValidationStatus.ERROR
        assert any("Found gap at position 2" in m for m in messages(result))

    def test_zero_position_is_error(self, ordering):
        ordering.body.ordering_data.items[1].correct_position = 0
        result = validate_question(ordering)

        assert result.status == ValidationStatus.ERROR
        assert "Item 2 must have a positive position" in messages(result)

    def test_missing_position_is_partial(self, ordering):
        ordering.body.ordering_data.items[1].correct_position = None
        result = validate_question(ordering)

        assert result.status == ValidationStatus.PARTIAL
        assert "Item 2 position" in result.missing_fields

    def test_single_item_is_missing_items(self, ordering):
        del ordering.body.ordering_data.items[1:]
        result = validate_question(ordering)

        assert result.status == ValidationStatus.PARTIAL
        assert "Ordering items" in result.missing_fields

    def test_more_than_ten_items_is_error(self, ordering_record):
        ordering_record["orderingData"]["items"] = [
            {"id": f"i{n}", "content": {"type": "text", "text": str(n)}, "correctPosition": n}
            for n in range(1, 12)
        ]
        result = validate_question(Question.from_record(ordering_record))

        assert result.status == ValidationStatus.ERROR
        assert "Maximum 10 items allowed" in messages(result)

    def test_image_without_alt_text(self, ordering):
        ordering.body.ordering_data.items[2].content.alt_text = ""
        result = validate_question(ordering)

        assert "Item 3 alt text" in result.missing_fields

    def test_missing_configuration(self):
        result = validate_question(Question(text="Order these", body=OrderingBody()))
        assert "Ordering configuration" in result.missing_fields


class TestMatchingValidation:
    """Test matching rules."""

    def test_unknown_right_reference_is_error(self, matching_record):
        matching_record["matchingData"]["correctMatches"][0]["rightId"] = "R9"
        result = validate_question(Question.from_record(matching_record))

        assert result.status == ValidationStatus.ERROR
        assert "Correct match 1 references unknown right item 'R9'" in messages(result)

    def test_unknown_left_reference_is_error(self, matching):
        data = matching.body.matching_data
        data.correct_matches[1] = data.correct_matches[1].model_copy(update={"left_id": "L9"})
        result = validate_question(matching)

        assert result.status == ValidationStatus.ERROR
        assert "Correct match 2 references unknown left item 'L9'" in messages(result)

    def test_left_item_matched_twice_is_error(self, matching_record):
        matching_record["matchingData"]["correctMatches"].append({"leftId": "L1", "rightId": "R4"})
        result = validate_question(Question.from_record(matching_record))

        assert "Left item 'L1' is matched more than once" in messages(result)

    def test_too_many_left_items(self, matching_record):
        matching_record["matchingData"]["leftItems"] = [
            {"id": f"L{n}", "position": n, "content": {"type": "text", "text": str(n)}}
            for n in range(1, 10)
        ]
        result = validate_question(Question.from_record(matching_record))

        assert "Maximum 8 left items allowed" in messages(result)

    def test_right_positions_must_be_sequential(self, matching):
        matching.body.matching_data.right_items[3].position = 6
        result = validate_question(matching)

        assert any(m.startswith("Right item positions must be sequential") for m in messages(result))

    def test_no_correct_matches_is_missing(self, matching):
        matching.body.matching_data.correct_matches = []
        result = validate_question(matching)

        assert result.status == ValidationStatus.PARTIAL
        assert "Correct matches" in result.missing_fields


class TestSummaries:
    """Test the one-line summary and quiz validation."""

    def test_summary_complete(self, single_choice):
        assert question_validation_summary(single_choice) == "Question is complete and ready to use"

    def test_summary_errors(self, single_choice):
        single_choice.body.options[1].is_correct = True
        assert question_validation_summary(single_choice) == "1 error needs to be fixed"

    def test_summary_missing(self):
        summary = question_validation_summary(Question(text="Name it", body=TextInputBody()))
        assert summary == "33% complete - missing: Text input configuration"

    def test_quiz_complete(self, quiz):
        result = validate_quiz(quiz)

        assert result.status == ValidationStatus.COMPLETE
        assert result.complete_count == 6

    def test_quiz_short_title_is_error(self, quiz):
        quiz.title = "Q"
        result = validate_quiz(quiz)

        assert result.status == ValidationStatus.ERROR
        assert result.errors[0].field == "title"

    def test_quiz_without_questions_is_error(self, quiz):
        quiz.questions = []
        assert validate_quiz(quiz).status == ValidationStatus.ERROR

    def test_quiz_with_unfinished_question_is_partial(self, quiz):
        quiz.questions.append(Question(id="q-new", text="Draft", body=TextInputBody()))
        result = validate_quiz(quiz)

        assert result.status == ValidationStatus.PARTIAL
        assert result.questions["q-new"].status == ValidationStatus.PARTIAL

"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.quizcore.types import Question, Quiz


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


# =============================================================================
# Question records (stored camelCase shape)
# =============================================================================


@pytest.fixture
def single_choice_record():
    return {
        "id": "q-capital",
        "text": "What is the capital of France?",
        "text_sl": "Katero je glavno mesto Francije?",
        "questionType": "SINGLE_CHOICE",
        "options": [
            {"id": "paris", "text": "Paris", "isCorrect": True},
            {"id": "lyon", "text": "Lyon", "isCorrect": False},
            {"id": "nice", "text": "Nice", "text_sl": "Nica", "isCorrect": False},
        ],
    }


@pytest.fixture
def multiple_choice_record():
    return {
        "id": "q-primes",
        "text": "Which of these are prime?",
        "questionType": "MULTIPLE_CHOICE",
        "options": [
            {"id": "A", "text": "2", "isCorrect": True},
            {"id": "B", "text": "3", "isCorrect": True},
            {"id": "C", "text": "4", "isCorrect": False},
            {"id": "D", "text": "6", "isCorrect": False},
        ],
        "multipleChoiceData": {
            "scoringMethod": "PARTIAL_CREDIT",
            "minSelections": 1,
            "maxSelections": 3,
            "partialCreditRules": {
                "correctSelectionPoints": 1,
                "incorrectSelectionPenalty": -0.5,
                "minScore": 0,
            },
        },
    }


@pytest.fixture
def text_input_record():
    return {
        "id": "q-text",
        "text": "Name the capital of France",
        "questionType": "TEXT_INPUT",
        "textInputData": {
            "acceptableAnswers": ["Paris", "paris"],
            "caseSensitive": False,
            "placeholder": "City name",
            "placeholder_sl": "Ime mesta",
        },
    }


@pytest.fixture
def dropdown_record():
    return {
        "id": "q-fox",
        "text": "Complete the sentence",
        "questionType": "DROPDOWN",
        "dropdownData": {
            "template": "The {a} jumped over the {b}",
            "template_sl": "{a} je skočila čez {b}",
            "dropdowns": [
                {
                    "id": "a",
                    "label": "Animal",
                    "label_sl": "Žival",
                    "options": [
                        {"id": "fox", "text": "fox", "isCorrect": True},
                        {"id": "dog", "text": "dog", "isCorrect": False},
                    ],
                },
                {
                    "id": "b",
                    "label": "Obstacle",
                    "options": [
                        {"id": "fence", "text": "fence", "isCorrect": True},
                        {"id": "moon", "text": "moon", "isCorrect": False},
                    ],
                },
            ],
            "scoring": {
                "pointsPerDropdown": 1,
                "requireAllCorrect": True,
                "penalizeIncorrect": False,
            },
        },
    }


@pytest.fixture
def ordering_record():
    return {
        "id": "q-order",
        "text": "Order the planets by distance from the sun",
        "questionType": "ORDERING",
        "orderingData": {
            "instructions": "Closest first",
            "items": [
                {"id": "earth", "content": {"type": "text", "text": "Earth"}, "correctPosition": 3},
                {"id": "mercury", "content": {"type": "text", "text": "Mercury"}, "correctPosition": 1},
                {
                    "id": "venus",
                    "content": {"type": "image", "imageUrl": "/img/venus.png", "altText": "Venus"},
                    "correctPosition": 2,
                },
            ],
        },
    }


@pytest.fixture
def matching_record():
    return {
        "id": "q-match",
        "text": "Match countries to capitals",
        "questionType": "MATCHING",
        "matchingData": {
            "instructions": "Click a country, then its capital",
            "leftItems": [
                {"id": "L1", "position": 1, "content": {"type": "text", "text": "France"}},
                {"id": "L2", "position": 2, "content": {"type": "text", "text": "Spain"}},
                {"id": "L3", "position": 3, "content": {"type": "text", "text": "Italy"}},
            ],
            "rightItems": [
                {"id": "R1", "position": 1, "content": {"type": "text", "text": "Paris"}},
                {"id": "R2", "position": 2, "content": {"type": "text", "text": "Madrid"}},
                {"id": "R3", "position": 3, "content": {"type": "text", "text": "Rome"}},
                {"id": "R4", "position": 4, "content": {"type": "text", "text": "Lisbon"}},
            ],
            "correctMatches": [
                {"leftId": "L1", "rightId": "R1"},
                {"leftId": "L2", "rightId": "R2"},
                {"leftId": "L3", "rightId": "R3", "explanation": "Rome is the capital of Italy"},
            ],
            "scoring": {
                "pointsPerMatch": 1,
                "penalizeIncorrect": True,
                "penaltyPerIncorrect": 0.5,
                "requireAllMatches": True,
                "partialCredit": True,
            },
        },
    }


# =============================================================================
# Parsed questions
# =============================================================================


@pytest.fixture
def single_choice(single_choice_record):
    return Question.from_record(single_choice_record)


@pytest.fixture
def multiple_choice(multiple_choice_record):
    return Question.from_record(multiple_choice_record)


@pytest.fixture
def text_input(text_input_record):
    return Question.from_record(text_input_record)


@pytest.fixture
def dropdown(dropdown_record):
    return Question.from_record(dropdown_record)


@pytest.fixture
def ordering(ordering_record):
    return Question.from_record(ordering_record)


@pytest.fixture
def matching(matching_record):
    return Question.from_record(matching_record)


@pytest.fixture
def quiz_record(
    single_choice_record,
    multiple_choice_record,
    text_input_record,
    dropdown_record,
    ordering_record,
    matching_record,
):
    return {
        "id": "geo-101",
        "title": "Geography basics",
        "title_sl": "Osnove geografije",
        "teacherId": "teacher-1",
        "questions": [
            single_choice_record,
            multiple_choice_record,
            text_input_record,
            dropdown_record,
            ordering_record,
            matching_record,
        ],
    }


@pytest.fixture
def quiz(quiz_record):
    return Quiz.from_record(quiz_record)

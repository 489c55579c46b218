"""
Quizcore: quiz question model, authoring validation and scoring.

Six question types share one record shape and one submission pipeline:
SINGLE_CHOICE, MULTIPLE_CHOICE, TEXT_INPUT, DROPDOWN, ORDERING, MATCHING.

Components:
- types: Question/Quiz models with a tagged body per question type
- validation: Authoring completeness and structural checks
- scoring: Per-type scoring and quiz submissions
- template: Dropdown template rendering
- interaction: Student-side state (session, ordering, matching)
- builders: Typed authoring builders per question type
- store: JSON quiz files
"""

from src.quizcore.builders import (
    DropdownBuilder,
    MatchingBuilder,
    MultipleChoiceBuilder,
    OrderingBuilder,
    SingleChoiceBuilder,
    TextInputBuilder,
)
from src.quizcore.exceptions import (
    QuestionIncompleteError,
    QuestionRecordError,
    QuestionTypeMismatchError,
    QuizCoreError,
    QuizFileError,
    UnknownQuestionError,
)
from src.quizcore.interaction import MatchingConnector, OrderingPresenter, QuizSession
from src.quizcore.localization import localized
from src.quizcore.questions.base import ScoreResult
from src.quizcore.scoring import Submission, score_question, score_quiz
from src.quizcore.store import QuizStore, load_quiz_file
from src.quizcore.template import DropdownSelections, find_placeholders, render_template
from src.quizcore.types import Connection, Question, QuestionType, Quiz
from src.quizcore.validation import (
    ValidationResult,
    ValidationStatus,
    is_question_complete,
    validate_question,
    validate_quiz,
)

__all__ = [
    # Model
    "Question",
    "QuestionType",
    "Quiz",
    "Connection",
    # Authoring
    "validate_question",
    "validate_quiz",
    "is_question_complete",
    "ValidationResult",
    "ValidationStatus",
    "SingleChoiceBuilder",
    "MultipleChoiceBuilder",
    "TextInputBuilder",
    "DropdownBuilder",
    "OrderingBuilder",
    "MatchingBuilder",
    # Scoring
    "score_question",
    "score_quiz",
    "ScoreResult",
    "Submission",
    # Quiz-taking
    "QuizSession",
    "OrderingPresenter",
    "MatchingConnector",
    "DropdownSelections",
    "render_template",
    "find_placeholders",
    "localized",
    # Storage
    "QuizStore",
    "load_quiz_file",
    # Errors
    "QuizCoreError",
    "QuestionRecordError",
    "QuizFileError",
    "QuestionIncompleteError",
    "UnknownQuestionError",
    "QuestionTypeMismatchError",
]

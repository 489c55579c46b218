"""
Question type handlers.

Each question type (single choice, matching, ordering, etc.) has its own
module with:
- validate(): Add the type's authoring requirements to a tally
- normalize_answer(): Coerce whatever the client sent into the answer shape
- score(): Turn an answer into a ScoreResult
"""

from typing import TYPE_CHECKING

from ..types import QuestionType

if TYPE_CHECKING:
    from .base import QuestionHandler


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: str | QuestionType) -> "QuestionHandler | None":
    """Get the handler for a question type."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type.upper())
        except ValueError:
            return None
    return HANDLERS.get(question_type)


# Import handlers to trigger registration
from . import single_choice
from . import multiple_choice
from . import text_input
from . import dropdown
from . import ordering
from . import matching

__all__ = [
    "HANDLERS",
    "get_handler",
    "register",
]

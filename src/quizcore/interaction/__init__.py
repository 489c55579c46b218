"""
Student interaction state.

- QuizSession: per-student answers, frozen on submit
- OrderingPresenter: shuffled arrangement of an ordering question
- MatchingConnector: click-to-connect state of a matching question
"""

from src.quizcore.interaction.matching import MatchingConnector
from src.quizcore.interaction.ordering import OrderingPresenter, OrderingState, shuffle_away_from
from src.quizcore.interaction.tracker import QuizSession
from src.quizcore.questions.text_input import check_input_format

__all__ = [
    "QuizSession",
    "OrderingPresenter",
    "OrderingState",
    "shuffle_away_from",
    "MatchingConnector",
    "check_input_format",
]

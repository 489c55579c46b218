"""
Interaction state tracker.

A QuizSession holds one student's in-progress answers, keyed by question id.
An answer comes into existence on the first interaction with its question
and changes on every input until submit(). Submitting freezes the session,
so the scored state is exactly the state at the moment of submission; any
later input is ignored.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

from loguru import logger

from ..exceptions import QuestionTypeMismatchError, UnknownQuestionError
from ..questions.text_input import check_input_format
from ..scoring import Submission, score_quiz
from ..template import DropdownSelections
from ..types import Answer, Question, QuestionType
from .matching import MatchingConnector
from .ordering import OrderingPresenter


class QuizSession:
    """One student's pass through a list of questions."""

    def __init__(self, questions: Sequence[Question], rng: random.Random | None = None):
        self._questions = {q.id: q for q in questions}
        self._order = [q.id for q in questions]
        self._rng = rng or random.Random()
        self._answers: dict[str, Any] = {}
        self.submission: Submission | None = None

    @property
    def is_submitted(self) -> bool:
        return self.submission is not None

    @property
    def answered_ids(self) -> list[str]:
        return [qid for qid in self._order if qid in self._answers]

    def _question(self, question_id: str, *types: QuestionType) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise UnknownQuestionError(f"Unknown question: {question_id}")
        if types and question.question_type not in types:
            raise QuestionTypeMismatchError(
                f"Question {question_id} is {question.question_type.value}, "
                f"expected {' or '.join(t.value for t in types)}"
            )
        return question

    def _ignored(self, question_id: str) -> bool:
        if self.is_submitted:
            logger.debug(f"Session submitted, ignoring input for {question_id}")
            return True
        return False

    # =========================================================================
    # Choice and text
    # =========================================================================

    def select_option(self, question_id: str, option_id: str) -> bool:
        """Pick the single option of a SINGLE_CHOICE question."""
        question = self._question(question_id, QuestionType.SINGLE_CHOICE)
        if self._ignored(question_id):
            return False
        if not any(o.id == option_id for o in question.body.options):
            return False
        self._answers[question_id] = option_id
        return True

    def toggle_option(self, question_id: str, option_id: str) -> bool:
        """
        Add or remove an option of a MULTIPLE_CHOICE question.

        Adding beyond maxSelections is refused.
        """
        question = self._question(question_id, QuestionType.MULTIPLE_CHOICE)
        if self._ignored(question_id):
            return False
        if not any(o.id == option_id for o in question.body.options):
            return False

        selected: list[str] = self._answers.setdefault(question_id, [])
        if option_id in selected:
            selected.remove(option_id)
            return True

        max_selections = question.body.multiple_choice_data.max_selections
        if max_selections is not None and len(selected) >= max_selections:
            return False
        selected.append(option_id)
        return True

    def set_text(self, question_id: str, text: str) -> bool:
        """Replace the typed answer of a TEXT_INPUT question."""
        self._question(question_id, QuestionType.TEXT_INPUT)
        if self._ignored(question_id):
            return False
        self._answers[question_id] = text
        return True

    def text_format_ok(self, question_id: str) -> bool:
        """Whether the current text matches the question's input type."""
        question = self._question(question_id, QuestionType.TEXT_INPUT)
        data = question.body.text_input_data
        if data is None:
            return True
        return check_input_format(self._answers.get(question_id, ""), data.input_type)

    # =========================================================================
    # Dropdown, ordering, matching
    # =========================================================================

    def dropdown(self, question_id: str) -> DropdownSelections:
        question = self._question(question_id, QuestionType.DROPDOWN)
        if question_id not in self._answers:
            selections = DropdownSelections(question.body.dropdown_data)
            if self.is_submitted:
                selections.freeze()
            self._answers[question_id] = selections
        return self._answers[question_id]

    def select_dropdown_option(self, question_id: str, field_id: str, option_id: str) -> bool:
        selections = self.dropdown(question_id)
        if self._ignored(question_id):
            return False
        return selections.select(field_id, option_id)

    def ordering(self, question_id: str) -> OrderingPresenter:
        """Presenter for an ORDERING question, shuffled on first access."""
        question = self._question(question_id, QuestionType.ORDERING)
        if question_id not in self._answers:
            presenter = OrderingPresenter(question.body.ordering_data, rng=self._rng)
            presenter.present()
            if self.is_submitted:
                presenter.submit()
            self._answers[question_id] = presenter
        return self._answers[question_id]

    def matching(self, question_id: str) -> MatchingConnector:
        question = self._question(question_id, QuestionType.MATCHING)
        if question_id not in self._answers:
            connector = MatchingConnector(question.body.matching_data)
            if self.is_submitted:
                connector.freeze()
            self._answers[question_id] = connector
        return self._answers[question_id]

    # =========================================================================
    # Answers and submission
    # =========================================================================

    def answer_for(self, question_id: str) -> Answer:
        """Current answer in its scoring shape, or None if never touched."""
        self._question(question_id)
        state = self._answers.get(question_id)

        if isinstance(state, DropdownSelections):
            return state.as_dict()
        if isinstance(state, OrderingPresenter):
            return state.order
        if isinstance(state, MatchingConnector):
            return state.connections
        if isinstance(state, list):
            return list(state)
        return state

    def answers(self) -> dict[str, Answer]:
        return {qid: self.answer_for(qid) for qid in self.answered_ids}

    def submit(self) -> Submission:
        """
        Freeze the session and score every question once.

        Calling submit() again returns the same Submission.
        """
        if self.submission is not None:
            return self.submission

        for state in self._answers.values():
            if isinstance(state, OrderingPresenter):
                state.submit()
            elif isinstance(state, DropdownSelections):
                state.freeze()
            elif isinstance(state, MatchingConnector):
                state.freeze()

        answers = self.answers()
        self.submission = score_quiz([self._questions[qid] for qid in self._order], answers)
        logger.debug(f"Session submitted with {len(answers)} answered questions")
        return self.submission

"""
JSON quiz files.

Quizzes are stored one per file as {quiz_id}.json in the quiz data directory
(~/.quizcore/quizzes by default). Questions are only written once they
validate as complete.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from loguru import logger

from config import get_settings

from .exceptions import QuestionIncompleteError, QuestionRecordError, QuizFileError
from .types import Question, Quiz
from .validation import validate_question


def load_quiz_file(path: Path | str) -> Quiz:
    """
    Read a quiz from a JSON file.

    Accepts either a quiz object or a bare list of question records (which
    becomes an untitled quiz named after the file).

    Raises:
        QuizFileError: File missing or not valid JSON
        QuestionRecordError: A record does not fit the question model
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise QuizFileError(f"Quiz file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise QuizFileError(f"Cannot read quiz file {path}: {e}") from e

    if isinstance(data, list):
        data = {"id": path.stem, "title": path.stem, "questions": data}
    if not isinstance(data, dict):
        raise QuizFileError(f"Quiz file {path} must hold an object or a list of questions")

    return Quiz.from_record(data)


class QuizStore:
    """
    Manages quiz persistence.

    Quizzes are stored as JSON files with naming: {quiz_id}.json
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir or get_settings().quiz_data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, quiz_id: str) -> Path:
        return self.data_dir / f"{quiz_id}.json"

    def save_quiz(self, quiz: Quiz) -> Path:
        """Write a quiz to disk, replacing any previous version."""
        filepath = self._path(quiz.id)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(quiz.to_record(), f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved quiz {quiz.id} ({len(quiz.questions)} questions) to {filepath}")
        return filepath

    def load_quiz(self, quiz_id: str) -> Optional[Quiz]:
        """Load a quiz by id, or None if there is no such file."""
        filepath = self._path(quiz_id)
        if not filepath.exists():
            return None
        return load_quiz_file(filepath)

    def save_question(self, quiz_id: str, question: Question) -> Quiz:
        """
        Add or replace a question in a stored quiz.

        Raises:
            QuestionIncompleteError: The question does not validate as complete
            QuizFileError: No quiz with that id
        """
        result = validate_question(question)
        if not result.is_complete:
            raise QuestionIncompleteError(question.id, result)

        quiz = self.load_quiz(quiz_id)
        if quiz is None:
            raise QuizFileError(f"Quiz not found: {quiz_id}")

        for i, existing in enumerate(quiz.questions):
            if existing.id == question.id:
                quiz.questions[i] = question
                break
        else:
            quiz.questions.append(question)

        self.save_quiz(quiz)
        return quiz

    def delete_quiz(self, quiz_id: str) -> bool:
        filepath = self._path(quiz_id)
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    def list_quizzes(self) -> list[Quiz]:
        """All readable quizzes, sorted by title. Broken files are skipped."""
        quizzes = []
        for filepath in sorted(self.data_dir.glob("*.json")):
            try:
                quizzes.append(load_quiz_file(filepath))
            except (QuizFileError, QuestionRecordError) as e:
                logger.warning(f"Skipping {filepath.name}: {e}")
                continue
        return sorted(quizzes, key=lambda q: q.title.lower())

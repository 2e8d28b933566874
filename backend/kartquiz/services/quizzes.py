"""Saved-quiz catalog backed by the ``saved_quiz`` table."""

import uuid
from typing import List, Optional

from kartquiz.models import SavedQuiz
from kartquiz.services.rooms.errors import InvalidPayload, QuizNotFound
from kartquiz.services.rooms.room import parse_questions


def _key(quiz_id) -> Optional[str]:
    if quiz_id is None or quiz_id == '':
        return None
    return str(quiz_id)


class QuizStore:
    def __init__(self, db):
        self.db = db

    def list_all(self) -> List[dict]:
        quizzes = SavedQuiz.query.order_by(SavedQuiz.created_at, SavedQuiz.id).all()
        return [quiz.to_dict() for quiz in quizzes]

    def get(self, quiz_id) -> Optional[dict]:
        key = _key(quiz_id)
        quiz = self.db.session.get(SavedQuiz, key) if key else None
        return quiz.to_dict() if quiz else None

    def require(self, quiz_id) -> dict:
        quiz = self.get(quiz_id)
        if quiz is None:
            raise QuizNotFound()
        return quiz

    def save(self, quiz_id, title, questions) -> dict:
        """Insert or replace a quiz. Questions are normalized to the wire shape."""
        if not isinstance(title, str) or not title.strip():
            raise InvalidPayload('title is required')
        normalized = [question.to_dict() for question in parse_questions(questions)]
        key = _key(quiz_id) or uuid.uuid4().hex
        quiz = self.db.session.get(SavedQuiz, key)
        if quiz is None:
            quiz = SavedQuiz(id=key)
        quiz.title = title.strip()
        quiz.questions = normalized
        self.db.session.add(quiz)
        try:
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise
        return quiz.to_dict()

    def delete(self, quiz_id) -> bool:
        key = _key(quiz_id)
        quiz = self.db.session.get(SavedQuiz, key) if key else None
        if quiz is None:
            return False
        self.db.session.delete(quiz)
        try:
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise
        return True

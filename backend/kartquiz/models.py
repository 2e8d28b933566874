from datetime import datetime, timezone
import json

from kartquiz import db


def _utcnow():
    return datetime.now(timezone.utc)


class SavedQuiz(db.Model):
    __tablename__ = 'saved_quiz'
    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    questions_json = db.Column('questions', db.Text, nullable=False, default='[]')
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    @property
    def questions(self):
        try:
            return json.loads(self.questions_json or '[]')
        except ValueError:
            return []

    @questions.setter
    def questions(self, value):
        self.questions_json = json.dumps(value)

    def to_dict(self):
        created = self.created_at
        if created is not None and created.tzinfo is None:
            # SQLite drops tzinfo on the way back
            created = created.replace(tzinfo=timezone.utc)
        return {
            'id': self.id,
            'title': self.title,
            'questions': self.questions,
            'createdAt': created.isoformat() if created else None,
        }

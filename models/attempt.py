"""
Attempt history models. Rows are written once and never updated.
"""
from models import db
from utils.timeutils import now_utc, isoformat


class AttemptedQuestion(db.Model):
    """A practice question the user answered"""
    __tablename__ = 'attempted_questions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=True, index=True)
    subject = db.Column(db.String(100))
    chapter = db.Column(db.String(200))
    topic = db.Column(db.String(200))
    is_correct = db.Column(db.Boolean, default=False)
    attempted_at = db.Column(db.DateTime, default=now_utc)
    time_taken = db.Column(db.Integer, nullable=True)  # seconds

    def to_dict(self):
        return {
            'questionId': self.question_id,
            'subject': self.subject,
            'chapter': self.chapter,
            'topic': self.topic,
            'isCorrect': self.is_correct,
            'attemptedAt': isoformat(self.attempted_at),
            'timeTaken': self.time_taken,
        }

    def __repr__(self):
        return f'<AttemptedQuestion user={self.user_id} q={self.question_id}>'


class MockTestRecord(db.Model):
    """Result of one mock test attempt with per-question evaluation"""
    __tablename__ = 'mock_test_records'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    mock_test_id = db.Column(db.Integer, db.ForeignKey('mock_tests.id'), nullable=False, index=True)
    mock_test_name = db.Column(db.String(200))
    exam = db.Column(db.String(10))
    status = db.Column(db.String(20), default='unattempted')  # attempted, unattempted
    score = db.Column(db.Integer, default=0)
    total_questions = db.Column(db.Integer, default=0)
    correct_answers = db.Column(db.Integer, default=0)
    wrong_answers = db.Column(db.Integer, default=0)
    unanswered = db.Column(db.Integer, default=0)
    time_taken = db.Column(db.Integer, nullable=True)  # seconds
    submitted_late = db.Column(db.Boolean, default=False)
    attempted_at = db.Column(db.DateTime, default=now_utc)
    answers = db.Column(db.JSON, nullable=False, default=list)

    def results_dict(self):
        return {
            'score': self.score,
            'correctAnswers': self.correct_answers,
            'wrongAnswers': self.wrong_answers,
            'unanswered': self.unanswered,
            'totalQuestions': self.total_questions,
            'timeTaken': self.time_taken,
            'submittedLate': self.submitted_late,
        }

    def __repr__(self):
        return f'<MockTestRecord user={self.user_id} test={self.mock_test_id} {self.status}>'

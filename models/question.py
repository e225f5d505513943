"""
Question model definition
"""
from models import db
from utils.timeutils import now_utc


class Question(db.Model):
    """Practice / mock test question. Options are stored as JSON."""
    __tablename__ = 'questions'
    __table_args__ = (
        db.Index('ix_questions_exam_subject_chapter_topic', 'exam', 'subject', 'chapter', 'topic'),
    )

    id = db.Column(db.Integer, primary_key=True)
    exam = db.Column(db.String(10), nullable=False, index=True)  # JEE, NEET
    subject = db.Column(db.String(100), nullable=False, index=True)
    chapter = db.Column(db.String(200), nullable=False, index=True)
    topic = db.Column(db.String(200), nullable=False, index=True)
    question_type = db.Column(db.String(10), nullable=False, default='MCQ')  # MCQ, NUMERICAL
    question_text = db.Column(db.Text, nullable=False)
    question_image_url = db.Column(db.String(500), nullable=True)
    options = db.Column(db.JSON, nullable=True)  # [{"label": "A", "text": ..., "imageUrl": ...}]
    correct_answer = db.Column(db.String(50), nullable=False)
    difficulty = db.Column(db.String(10), default='medium')  # easy, medium, hard
    year = db.Column(db.Integer, nullable=True)
    source = db.Column(db.String(200), nullable=True)
    solution = db.Column(db.Text, nullable=True)
    solution_image_url = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    created_at = db.Column(db.DateTime, default=now_utc)

    @property
    def is_mcq(self):
        return self.question_type == 'MCQ'

    def to_dict(self, reveal_answer=False):
        """
        Serialize for JSON responses.
        The answer key and solution are only included when reveal_answer is set.
        """
        data = {
            '_id': self.id,
            'exam': self.exam,
            'subject': self.subject,
            'chapter': self.chapter,
            'topic': self.topic,
            'questionType': self.question_type,
            'questionText': self.question_text,
            'questionImageUrl': self.question_image_url,
            'options': self.options or [],
            'difficulty': self.difficulty,
            'year': self.year,
            'source': self.source,
        }
        if reveal_answer:
            data['correctAnswer'] = self.correct_answer
            data['solution'] = self.solution
            data['solutionImageUrl'] = self.solution_image_url
        return data

    def __repr__(self):
        return f'<Question {self.id} {self.exam}/{self.subject}>'

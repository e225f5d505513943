"""
User model definition
"""
import random
import string
import time

from flask_login import UserMixin

from models import db
from utils.timeutils import now_utc, isoformat

MAX_ACCOUNTS_PER_EMAIL = 3


def generate_user_uid():
    """Stable public id, e.g. USR1718000000000k3j9x0q2a"""
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"USR{int(time.time() * 1000)}{suffix}"


class User(UserMixin, db.Model):
    """Registered learner; owns daily usage, subscription and attempt history"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    user_uid = db.Column(db.String(40), unique=True, nullable=False, default=generate_user_uid)
    email = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(255), nullable=False)  # encrypted by the registration flow
    password_hash = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    # Subscription
    subscription_type = db.Column(db.String(10), nullable=False, default='free')  # free, silver, gold
    subscription_expiry_date = db.Column(db.DateTime, nullable=True)
    plan_duration = db.Column(db.String(4), nullable=True)  # 1M, 6M, 1Y
    plan_amount_paid = db.Column(db.Integer, nullable=True)
    plan_start_date = db.Column(db.DateTime, nullable=True)
    is_gift_code_used = db.Column(db.Boolean, default=False)
    gift_code = db.Column(db.String(12), nullable=True)
    gift_code_used_at = db.Column(db.DateTime, nullable=True)

    # Profile
    name = db.Column(db.String(100))
    profession = db.Column(db.String(20))  # student, teacher
    grade = db.Column(db.String(50))
    preparing_for = db.Column(db.String(100))
    college_name = db.Column(db.String(200))
    school_name = db.Column(db.String(200))
    state = db.Column(db.String(100))
    life_ambition = db.Column(db.String(50))
    user_details_completed = db.Column(db.Boolean, default=False)
    selected_exam = db.Column(db.String(10))  # JEE, NEET

    # Daily usage, reset at IST midnight
    usage_date = db.Column(db.DateTime, nullable=True, default=now_utc)
    questions_attempted = db.Column(db.Integer, nullable=False, default=0)
    chapter_tests_generated = db.Column(db.Integer, nullable=False, default=0)
    mock_tests_attempted = db.Column(db.Integer, nullable=False, default=0)
    daily_session_limit_reached = db.Column(db.Boolean, default=False)

    # At most one mock test in progress
    ongoing_mock_test_id = db.Column(db.Integer, db.ForeignKey('mock_tests.id'), nullable=True)
    ongoing_started_at = db.Column(db.DateTime, nullable=True)
    ongoing_expires_at = db.Column(db.DateTime, nullable=True)

    version = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=now_utc)
    last_login = db.Column(db.DateTime, default=now_utc)

    # Relationships
    attempted_questions = db.relationship(
        'AttemptedQuestion', backref='user', lazy=True,
        order_by='AttemptedQuestion.id',
    )
    mock_test_records = db.relationship(
        'MockTestRecord', backref='user', lazy=True,
        order_by='MockTestRecord.id',
    )
    payments = db.relationship('Payment', backref='user', lazy=True)

    __mapper_args__ = {'version_id_col': version}

    @classmethod
    def check_account_limit(cls, email):
        """True while the email is below the per-email account cap"""
        count = cls.query.filter_by(email=email.strip().lower()).count()
        return count < MAX_ACCOUNTS_PER_EMAIL

    def has_ongoing_mock_test(self, now=None):
        if self.ongoing_mock_test_id is None or self.ongoing_expires_at is None:
            return False
        return self.ongoing_expires_at > (now or now_utc())

    def clear_ongoing_mock_test(self):
        self.ongoing_mock_test_id = None
        self.ongoing_started_at = None
        self.ongoing_expires_at = None

    def daily_usage_dict(self):
        return {
            'date': isoformat(self.usage_date),
            'questionsAttempted': self.questions_attempted,
            'chapterTestsGenerated': self.chapter_tests_generated,
            'mockTestsAttempted': self.mock_tests_attempted,
        }

    def ongoing_mock_test_dict(self):
        if self.ongoing_mock_test_id is None:
            return None
        return {
            'mockTestId': self.ongoing_mock_test_id,
            'startedAt': isoformat(self.ongoing_started_at),
            'expiresAt': isoformat(self.ongoing_expires_at),
        }

    def __repr__(self):
        return f'<User {self.user_uid}>'

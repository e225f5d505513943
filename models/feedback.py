"""
Feedback model definition
"""
from models import db
from utils.timeutils import now_utc, isoformat


class Feedback(db.Model):
    """Query or refund feedback left by a user"""
    __tablename__ = 'feedback'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(255))
    feedback_type = db.Column(db.String(10), nullable=False)  # refund, query
    message = db.Column(db.Text)
    rating = db.Column(db.Integer)  # 1-5
    refund_status = db.Column(db.String(20))  # incomplete, complete; refund feedback only
    created_at = db.Column(db.DateTime, default=now_utc)

    def to_dict(self):
        return {
            'id': self.id,
            'feedbackType': self.feedback_type,
            'message': self.message,
            'rating': self.rating,
            'refundStatus': self.refund_status,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<Feedback {self.id} {self.feedback_type}>'

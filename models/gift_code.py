"""
Gift code model definition
"""
from models import db
from utils.timeutils import now_utc

GIFT_CODE_LENGTH = 12


class GiftCode(db.Model):
    """Single-use code granting a gold plan for a fixed duration"""
    __tablename__ = 'gift_codes'

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(GIFT_CODE_LENGTH), unique=True, nullable=False)
    duration = db.Column(db.String(4), nullable=False)  # 1M, 6M, 1Y
    is_used = db.Column(db.Boolean, default=False, nullable=False)
    used_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    used_at = db.Column(db.DateTime, nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('admins.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=now_utc)

    def __repr__(self):
        return f'<GiftCode {self.code}>'

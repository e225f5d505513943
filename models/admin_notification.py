"""
Admin Notification model definition
"""
from models import db
from utils.timeutils import now_utc


class AdminNotification(db.Model):
    """Audit entry surfaced to admins"""
    __tablename__ = 'admin_notifications'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(50), nullable=False)  # payment, refund, giftcode, feedback, system
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    related_id = db.Column(db.Integer, nullable=True)  # payment_id, user_id
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=now_utc)

    def __repr__(self):
        return f'<AdminNotification {self.id}: {self.type}>'

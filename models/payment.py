"""
Payment model definition
"""
from models import db
from utils.timeutils import now_utc, isoformat


class Payment(db.Model):
    """One gateway transaction for a paid plan; carries at most one refund"""
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    gateway_order_id = db.Column(db.String(100), unique=True, nullable=True)
    gateway_payment_id = db.Column(db.String(100), unique=True, nullable=True)
    gateway_signature = db.Column(db.String(255), nullable=True)
    amount_paid = db.Column(db.Integer, nullable=False)  # rupees
    plan_type = db.Column(db.String(10), nullable=False)  # silver, gold
    plan_duration = db.Column(db.String(4), nullable=False)  # 1M, 6M, 1Y
    plan_duration_days = db.Column(db.Integer, nullable=True)
    plan_start_date = db.Column(db.DateTime, nullable=True)
    plan_expiry_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(20), default='pending')  # pending, success, failed

    refund_used = db.Column(db.Boolean, default=False)
    refund_amount = db.Column(db.Integer, nullable=True)
    refund_percent = db.Column(db.Integer, nullable=True)
    refund_id = db.Column(db.String(100), nullable=True)
    refund_date = db.Column(db.DateTime, nullable=True)
    refund_status = db.Column(db.String(20), default='none')  # none, requested, processing, completed

    created_at = db.Column(db.DateTime, default=now_utc)

    def to_dict(self):
        return {
            'id': self.id,
            'orderId': self.gateway_order_id,
            'paymentId': self.gateway_payment_id,
            'amountPaid': self.amount_paid,
            'planType': self.plan_type,
            'planDuration': self.plan_duration,
            'planStartDate': isoformat(self.plan_start_date),
            'planExpiryDate': isoformat(self.plan_expiry_date),
            'status': self.status,
            'refundUsed': self.refund_used,
            'refundStatus': self.refund_status,
        }

    def __repr__(self):
        return f'<Payment {self.id} {self.status}>'

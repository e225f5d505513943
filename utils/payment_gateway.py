"""
Payment gateway utility functions (order references and signature checks)
"""
import hashlib
import hmac
import uuid
from datetime import datetime

from flask import current_app

CURRENCY = 'INR'


def generate_order_reference():
    """Generate unique order reference"""
    return f"order_{uuid.uuid4().hex[:14]}{datetime.now().strftime('%Y%m%d')}"


def to_paise(amount):
    return int(amount) * 100


def _secret():
    return (current_app.config.get('PAYMENT_GATEWAY_SECRET') or '').encode('utf-8')


def sign_payment(order_id, payment_id):
    """Signature the gateway sends for a captured payment: HMAC-SHA256 of 'order|payment'"""
    payload = f"{order_id}|{payment_id}".encode('utf-8')
    return hmac.new(_secret(), payload, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id, payment_id, signature):
    """True when signature matches the order/payment pair"""
    if not order_id or not payment_id or not signature or not _secret():
        return False
    return hmac.compare_digest(sign_payment(order_id, payment_id), str(signature))

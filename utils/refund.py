"""
Refund calculator

The refund percentage depends on how much of the plan period has been used:
up to 10% -> 60, up to 40% -> 45, up to 60% -> 30, beyond that nothing.
"""
import math

from flask import current_app

from models.payment import Payment
from utils.db_helper import commit_changes
from utils.timeutils import now_utc

SECONDS_PER_DAY = 24 * 60 * 60

REFUND_SLABS = (
    (10, 60),
    (40, 45),
    (60, 30),
)


def refund_percent_for_usage(used_percent):
    for ceiling, percent in REFUND_SLABS:
        if used_percent <= ceiling:
            return percent
    return 0


def calculate_refund(payment, now=None):
    """Refund figures for a payment at time now; does not touch the database."""
    now = now or now_utc()
    total_seconds = (payment.plan_expiry_date - payment.plan_start_date).total_seconds()
    used_seconds = (now - payment.plan_start_date).total_seconds()
    used_percent = used_seconds / total_seconds * 100 if total_seconds > 0 else 100

    refund_percent = refund_percent_for_usage(used_percent)
    refund_amount = math.floor(payment.amount_paid * refund_percent / 100)
    return {
        'eligible': refund_percent > 0,
        'refundPercent': refund_percent,
        'refundAmount': refund_amount,
        'amountPaid': payment.amount_paid,
        'usedPercent': round(used_percent, 2),
        'usedDays': math.floor(used_seconds / SECONDS_PER_DAY),
        'totalDays': math.floor(total_seconds / SECONDS_PER_DAY),
    }


def _ineligible(reason):
    return {'eligible': False, 'refundPercent': 0, 'refundAmount': 0, 'reason': reason}


def latest_refundable_payment(user):
    return (
        Payment.query
        .filter_by(user_id=user.id, status='success', refund_used=False)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .first()
    )


def refund_quote(user, now=None):
    """
    Refund the user could get right now. Returns (quote, payment); payment is
    None when the user is not eligible at all.
    """
    if user.subscription_type == 'free':
        return _ineligible('No active paid subscription found'), None
    if user.is_gift_code_used:
        return _ineligible('Refund not available for gift code subscriptions'), None

    payment = latest_refundable_payment(user)
    if not payment:
        return _ineligible('No eligible payment found for refund'), None

    quote = calculate_refund(payment, now)
    if not quote['eligible']:
        quote['reason'] = 'More than 60% of the plan period has been used'
    return quote, payment


def request_refund(user, now=None):
    """
    Record a refund request for the latest eligible payment and notify the
    admins. Returns the quote; nothing is stored when it is not eligible.
    """
    now = now or now_utc()
    quote, payment = refund_quote(user, now)
    if not quote['eligible']:
        return quote

    payment.refund_used = True
    payment.refund_status = 'requested'
    payment.refund_amount = quote['refundAmount']
    payment.refund_percent = quote['refundPercent']
    payment.refund_date = now
    commit_changes()

    current_app.logger.info(
        f"Refund requested by user {user.id} for payment {payment.id}: {quote['refundAmount']}"
    )

    try:
        from utils.notifications import notify_refund_requested
        from utils.mail import send_refund_request_notification
        notify_refund_requested(user, payment)
        send_refund_request_notification(user, payment)
    except Exception as e:
        current_app.logger.error(f"Failed to send refund notification: {str(e)}", exc_info=True)

    quote['refundStatus'] = payment.refund_status
    return quote

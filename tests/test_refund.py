from datetime import datetime, timedelta

import pytest

from models.admin import Admin
from models.admin_notification import AdminNotification
from models.payment import Payment
from utils.refund import calculate_refund, refund_percent_for_usage, refund_quote, request_refund
from utils.timeutils import now_utc
from tests.factories import make_payment, make_user

START = datetime(2026, 1, 1)


@pytest.mark.parametrize('used_percent, expected', [
    (0, 60),
    (10, 60),
    (10.01, 45),
    (40, 45),
    (40.5, 30),
    (60, 30),
    (60.01, 0),
    (150, 0),
])
def test_refund_slabs(used_percent, expected):
    assert refund_percent_for_usage(used_percent) == expected


def _payment(amount=1000, days=100):
    return Payment(
        amount_paid=amount,
        plan_start_date=START,
        plan_expiry_date=START + timedelta(days=days),
    )


@pytest.mark.parametrize('used_days, percent, amount', [
    (5, 60, 600),
    (50, 30, 300),
    (70, 0, 0),
])
def test_calculate_refund(used_days, percent, amount):
    quote = calculate_refund(_payment(), now=START + timedelta(days=used_days))
    assert quote['refundPercent'] == percent
    assert quote['refundAmount'] == amount
    assert quote['eligible'] is (amount > 0)
    assert quote['usedDays'] == used_days
    assert quote['totalDays'] == 100


def test_refund_amount_is_floored():
    quote = calculate_refund(_payment(amount=49, days=30), now=START + timedelta(days=6))
    # 20% used -> 45% of 49 = 22.05
    assert quote['refundAmount'] == 22


def test_free_user_is_not_eligible(db):
    quote, payment = refund_quote(make_user())
    assert quote['eligible'] is False
    assert payment is None
    assert 'No active paid subscription' in quote['reason']


def test_gift_code_plan_is_not_eligible(db):
    user = make_user(tier='gold', is_gift_code_used=True)
    quote, _ = refund_quote(user)
    assert quote['eligible'] is False
    assert 'gift code' in quote['reason']


def test_paid_user_without_payment(db):
    quote, _ = refund_quote(make_user(tier='silver'))
    assert quote['eligible'] is False


def test_quote_uses_latest_unrefunded_payment(db):
    user = make_user(tier='gold')
    now = now_utc()
    make_payment(user, amount=299, start=now - timedelta(days=40), days=30, refund_used=True)
    latest = make_payment(user, amount=2000, start=now - timedelta(days=1), days=365)

    quote, payment = refund_quote(user, now)

    assert payment.id == latest.id
    assert quote['refundPercent'] == 60
    assert quote['refundAmount'] == 1200


def test_request_refund_marks_payment_and_notifies(db):
    db.session.add(Admin(email='admin@example.com', name='Admin'))
    user = make_user(tier='gold')
    now = now_utc()
    payment = make_payment(user, amount=1000, start=now - timedelta(days=20), days=100)

    quote = request_refund(user, now)

    assert quote['eligible'] is True
    assert quote['refundAmount'] == 450
    assert quote['refundStatus'] == 'requested'
    payment = db.session.get(Payment, payment.id)
    assert payment.refund_used is True
    assert payment.refund_status == 'requested'
    assert payment.refund_amount == 450
    assert payment.refund_percent == 45
    assert AdminNotification.query.filter_by(type='refund', related_id=payment.id).count() == 1

    again = request_refund(user, now)
    assert again['eligible'] is False


def test_ineligible_request_changes_nothing(db):
    user = make_user(tier='gold')
    now = now_utc()
    payment = make_payment(user, amount=1000, start=now - timedelta(days=80), days=100)

    quote = request_refund(user, now)

    assert quote['eligible'] is False
    assert db.session.get(Payment, payment.id).refund_used is False

"""
Subscription state: tier activity, the tier whose limits apply, plan
activation after payment and gift-code redemption.
"""
from datetime import timedelta

from flask import current_app
from sqlalchemy import update

from models import db
from models.gift_code import GiftCode, GIFT_CODE_LENGTH
from utils.errors import InvalidInput, NotFound
from utils.timeutils import now_utc

PAID_TIERS = ('silver', 'gold')

DURATION_DAYS = {
    '1M': 30,
    '6M': 180,
    '1Y': 365,
}

PLAN_FEATURES = {
    'free': {'questionsPerDay': 50, 'chapterTests': 0, 'mockTests': 0, 'formulas': False, 'flashcards': False},
    'silver': {'questionsPerDay': 200, 'chapterTests': 10, 'mockTests': 0, 'formulas': False, 'flashcards': False},
    'gold': {'questionsPerDay': 5000, 'chapterTests': 50, 'mockTests': 8, 'formulas': True, 'flashcards': True},
}

# Prices in rupees
PLAN_PRICES = {
    'silver': [
        {'duration': '1M', 'mrp': 100, 'price': 49, 'savings': 51},
        {'duration': '6M', 'mrp': 500, 'price': 249, 'savings': 50},
        {'duration': '1Y', 'mrp': 1000, 'price': 399, 'savings': 60},
    ],
    'gold': [
        {'duration': '1M', 'mrp': 600, 'price': 299, 'savings': 50},
        {'duration': '6M', 'mrp': 2500, 'price': 1299, 'savings': 48},
        {'duration': '1Y', 'mrp': 5000, 'price': 2000, 'savings': 60},
    ],
}


def get_plans():
    """Plan catalogue returned by /api/subscription/plans"""
    return {
        'free': {'name': 'Free', 'price': 0, 'features': PLAN_FEATURES['free']},
        'silver': {'name': 'Silver', 'plans': PLAN_PRICES['silver'], 'features': PLAN_FEATURES['silver']},
        'gold': {'name': 'Gold', 'plans': PLAN_PRICES['gold'], 'features': PLAN_FEATURES['gold']},
    }


def get_plan_price(plan_type, duration):
    """Catalogue price for a paid plan, or None if the combination is unknown."""
    for entry in PLAN_PRICES.get(plan_type, []):
        if entry['duration'] == duration:
            return entry['price']
    return None


def duration_days(duration):
    days = DURATION_DAYS.get(duration)
    if days is None:
        raise InvalidInput(f"Unknown plan duration: {duration}")
    return days


def is_active(user, now=None):
    """Free is always active; paid tiers are active until their expiry."""
    if user.subscription_type == 'free':
        return True
    if not user.subscription_expiry_date:
        return False
    return (now or now_utc()) < user.subscription_expiry_date


def effective_tier(user, now=None):
    """Tier whose limits apply: an expired paid tier counts as free."""
    tier = user.subscription_type or 'free'
    if tier in PAID_TIERS and not is_active(user, now):
        return 'free'
    return tier


def activate_paid_plan(user, payment):
    """Copy a successful payment's plan onto the user. Caller commits."""
    user.subscription_type = payment.plan_type
    user.subscription_expiry_date = payment.plan_expiry_date
    user.plan_duration = payment.plan_duration
    user.plan_amount_paid = payment.amount_paid
    user.plan_start_date = payment.plan_start_date
    # A paid plan replaces any gift-code plan, so refunds follow the payment
    user.is_gift_code_used = False


def _claim_gift_code(gift_code, user, now):
    """Flip is_used only if still unused; False when another request won."""
    result = db.session.execute(
        update(GiftCode)
        .where(GiftCode.id == gift_code.id, GiftCode.is_used.is_(False))
        .values(is_used=True, used_by=user.id, used_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def grant_gift_subscription(user, gift_code, now):
    """Upgrade the user to gold for the code's duration."""
    user.subscription_type = 'gold'
    user.subscription_expiry_date = now + timedelta(days=duration_days(gift_code.duration))
    user.plan_duration = gift_code.duration
    user.plan_amount_paid = 0
    user.plan_start_date = now
    user.is_gift_code_used = True
    user.gift_code = gift_code.code
    user.gift_code_used_at = now


def apply_gift_code(user, code, now=None):
    """
    Redeem a gift code for the user.

    The code is claimed and the user upgraded in one transaction: if anything
    fails after the claim, both sides are rolled back.
    """
    now = now or now_utc()
    code = (code or '').strip().upper()
    if len(code) != GIFT_CODE_LENGTH:
        raise InvalidInput('Invalid gift code format')

    query = GiftCode.query.filter_by(code=code, is_used=False)
    if db.engine.dialect.name != 'sqlite':
        query = query.with_for_update()
    gift_code = query.first()
    if not gift_code:
        raise NotFound('Invalid or already used gift code')

    try:
        if not _claim_gift_code(gift_code, user, now):
            raise NotFound('Invalid or already used gift code')
        grant_gift_subscription(user, gift_code, now)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.warning(f"Gift code {code} not applied for user {user.id}; rolled back")
        raise

    try:
        from utils.notifications import notify_gift_code_redeemed
        notify_gift_code_redeemed(gift_code, user)
    except Exception as e:
        current_app.logger.error(f"Failed to create gift code notification: {str(e)}", exc_info=True)

    return {
        'type': 'gold',
        'expiryDate': user.subscription_expiry_date.isoformat(),
        'duration': gift_code.duration,
    }

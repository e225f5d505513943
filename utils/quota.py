"""
Daily quota tracking.

Counters live on the users row and are reset lazily, on the first request of
a new IST calendar day. Limits depend on the subscription tier that currently
applies (see utils.subscription_helper.effective_tier).
"""
from utils.errors import QuotaExceeded
from utils.subscription_helper import effective_tier
from utils.timeutils import ist_date, now_utc

DAILY_LIMITS = {
    'free': {'questions': 50, 'chapterTests': 0, 'mockTests': 0},
    'silver': {'questions': 200, 'chapterTests': 10, 'mockTests': 0},
    'gold': {'questions': 5000, 'chapterTests': 50, 'mockTests': 8},
}

# limit key -> users column
USAGE_COUNTERS = {
    'questions': 'questions_attempted',
    'chapterTests': 'chapter_tests_generated',
    'mockTests': 'mock_tests_attempted',
}


def get_limits(tier):
    """Daily limits for a tier; unknown tiers get the free limits."""
    return dict(DAILY_LIMITS.get(tier, DAILY_LIMITS['free']))


def get_user_limits(user, now=None):
    return get_limits(effective_tier(user, now))


def reset_if_new_day(user, now=None):
    """
    Zero the daily counters when the IST day has rolled over since the last
    reset. Returns True when a reset happened; the caller persists.
    """
    now = now or now_utc()
    if user.usage_date is not None and ist_date(user.usage_date) == ist_date(now):
        return False

    user.usage_date = now
    user.questions_attempted = 0
    user.chapter_tests_generated = 0
    user.mock_tests_attempted = 0
    user.daily_session_limit_reached = False
    return True


def _limit_message(limit_key, limit, tier):
    if limit_key == 'questions':
        if tier == 'free':
            hint = 'Upgrade to Silver or Gold'
        elif tier == 'silver':
            hint = 'Upgrade to Gold'
        else:
            hint = 'Please come back tomorrow'
        return f"Daily limit of {limit} questions reached on the {tier} plan. {hint}."
    if limit_key == 'chapterTests':
        hint = 'Upgrade to Silver or Gold' if tier == 'free' else 'Upgrade to Gold for more tests'
        return f"Daily chapter test limit reached on the {tier} plan. {hint}."
    return f"Daily mock test limit reached on the {tier} plan. Upgrade to Gold subscription."


def ensure_quota(user, limit_key, now=None):
    """Raise QuotaExceeded if the counter for limit_key is already at its limit."""
    tier = effective_tier(user, now)
    limit = get_limits(tier)[limit_key]
    used = getattr(user, USAGE_COUNTERS[limit_key]) or 0
    if used >= limit:
        raise QuotaExceeded(_limit_message(limit_key, limit, tier), limit=limit, tier=tier)
    return limit


def consume(user, limit_key):
    counter = USAGE_COUNTERS[limit_key]
    setattr(user, counter, (getattr(user, counter) or 0) + 1)


def usage_summary(user, now=None):
    """Limits, usage and can-attempt flags as returned by check-limits."""
    limits = get_user_limits(user, now)
    usage = {
        'questionsAttempted': user.questions_attempted,
        'chapterTestsGenerated': user.chapter_tests_generated,
        'mockTestsAttempted': user.mock_tests_attempted,
    }
    return {
        'limits': limits,
        'usage': usage,
        'canAttemptQuestions': usage['questionsAttempted'] < limits['questions'],
        'canGenerateChapterTest': usage['chapterTestsGenerated'] < limits['chapterTests'],
        'canAttemptMockTest': usage['mockTestsAttempted'] < limits['mockTests'],
    }

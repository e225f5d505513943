"""
Routes package for the exam-prep API
"""
# Export blueprints for registration in app.py
from routes.public import public_bp
from routes.user.questions import questions_bp
from routes.user.mocktest import mocktest_bp
from routes.user.profile import profile_bp
from routes.user.subscriptions import subscriptions_bp
from routes.user.payment import payment_bp
from routes.user.analytics import analytics_bp
from routes.user.feedback import feedback_bp

__all__ = [
    'public_bp',
    'questions_bp',
    'mocktest_bp',
    'profile_bp',
    'subscriptions_bp',
    'payment_bp',
    'analytics_bp',
    'feedback_bp',
]

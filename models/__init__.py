"""
Models package for the exam-prep backend
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models here to ensure they're registered
from models.user import User
from models.question import Question
from models.mock_test import MockTest, MockTestQuestion
from models.attempt import AttemptedQuestion, MockTestRecord
from models.payment import Payment
from models.gift_code import GiftCode
from models.admin import Admin
from models.admin_notification import AdminNotification
from models.feedback import Feedback

__all__ = [
    'db',
    'User',
    'Question',
    'MockTest',
    'MockTestQuestion',
    'AttemptedQuestion',
    'MockTestRecord',
    'Payment',
    'GiftCode',
    'Admin',
    'AdminNotification',
    'Feedback',
]

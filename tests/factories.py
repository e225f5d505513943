"""
Row builders for tests. Each commits so ids are available.
"""
import itertools
from datetime import timedelta

from models import db
from models.gift_code import GiftCode
from models.mock_test import MockTest, MockTestQuestion
from models.payment import Payment
from models.question import Question
from models.user import User
from utils.timeutils import now_utc

_seq = itertools.count(1)

MCQ_OPTIONS = [
    {'label': 'A', 'text': 'Option A'},
    {'label': 'B', 'text': 'Option B'},
    {'label': 'C', 'text': 'Option C'},
    {'label': 'D', 'text': 'Option D'},
]


def make_user(tier='free', expiry=None, **kwargs):
    n = next(_seq)
    if tier != 'free' and expiry is None:
        expiry = now_utc() + timedelta(days=30)
    values = {
        'email': f'student{n}@example.com',
        'phone': f'90000{n:05d}',
        'subscription_type': tier,
        'subscription_expiry_date': expiry,
        'usage_date': now_utc(),
        'name': f'Student {n}',
    }
    values.update(kwargs)
    user = User(**values)
    db.session.add(user)
    db.session.commit()
    return user


def make_question(exam='JEE', subject='Physics', chapter='Kinematics', topic='Projectile',
                  question_type='MCQ', correct_answer='A', **kwargs):
    n = next(_seq)
    values = {
        'exam': exam,
        'subject': subject,
        'chapter': chapter,
        'topic': topic,
        'question_type': question_type,
        'question_text': f'Question {n}',
        'options': MCQ_OPTIONS if question_type == 'MCQ' else None,
        'correct_answer': correct_answer,
        'solution': f'Solution {n}',
    }
    values.update(kwargs)
    question = Question(**values)
    db.session.add(question)
    db.session.commit()
    return question


def make_questions(count, **kwargs):
    return [make_question(**kwargs) for _ in range(count)]


def make_mock_test(questions, name=None, exam='JEE', duration=180, **kwargs):
    mock_test = MockTest(
        name=name or f'Mock Test {next(_seq)}',
        exam=exam,
        duration=duration,
        total_questions=len(questions),
        **kwargs
    )
    for serial, question in enumerate(questions, start=1):
        mock_test.questions.append(MockTestQuestion(
            serial_number=serial,
            question_id=question.id,
            subject=question.subject,
        ))
    db.session.add(mock_test)
    db.session.commit()
    return mock_test


def make_gift_code(code='GIFTCODE0001', duration='1M', is_used=False):
    gift_code = GiftCode(code=code, duration=duration, is_used=is_used)
    db.session.add(gift_code)
    db.session.commit()
    return gift_code


def make_payment(user, amount=1000, plan_type='gold', duration='1Y', start=None, days=100, **kwargs):
    start = start or now_utc()
    values = {
        'user_id': user.id,
        'gateway_order_id': f'order_test_{next(_seq)}',
        'amount_paid': amount,
        'plan_type': plan_type,
        'plan_duration': duration,
        'plan_duration_days': days,
        'plan_start_date': start,
        'plan_expiry_date': start + timedelta(days=days),
        'status': 'success',
    }
    values.update(kwargs)
    payment = Payment(**values)
    db.session.add(payment)
    db.session.commit()
    return payment

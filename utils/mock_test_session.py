"""
Mock test session service

Per (user, test) an attempt moves NoAttempt -> InProgress -> Completed. The
InProgress state is the ongoing_* lock on the users row; a user holds at most
one lock at a time. Completed is an 'attempted' MockTestRecord, and there is at
most one per test.
"""
from datetime import timedelta

from flask import current_app

from models import db
from models.attempt import MockTestRecord
from models.mock_test import MockTest
from utils import quota
from utils.db_helper import commit_changes
from utils.errors import (
    AlreadyAttempted,
    AlreadyOngoing,
    MockTestNotStarted,
    NotAttempted,
    NotFound,
    SubmissionWindowClosed,
)
from utils.evaluation import evaluate_mock_answers
from utils.timeutils import now_utc


def _get_mock_test(mock_test_id, active_only=True):
    mock_test = db.session.get(MockTest, mock_test_id)
    if not mock_test or (active_only and not mock_test.is_active):
        raise NotFound('Mock test not found')
    return mock_test


def _attempted_record(user, mock_test_id):
    return MockTestRecord.query.filter_by(
        user_id=user.id, mock_test_id=mock_test_id, status='attempted'
    ).first()


def list_mock_tests(user, exam):
    """Active mock tests for an exam with this user's status for each"""
    mock_tests = (
        MockTest.query
        .filter_by(exam=exam, is_active=True)
        .order_by(MockTest.created_at, MockTest.id)
        .all()
    )
    statuses = {
        record.mock_test_id: record.status
        for record in MockTestRecord.query.filter_by(user_id=user.id).all()
    }
    ongoing_id = user.ongoing_mock_test_id if user.has_ongoing_mock_test() else None

    result = []
    for mock_test in mock_tests:
        data = mock_test.summary_dict()
        if mock_test.id == ongoing_id:
            data['status'] = 'ongoing'
        else:
            data['status'] = statuses.get(mock_test.id, 'unattempted')
        result.append(data)
    return result


def start(user, mock_test_id, now=None):
    """
    Take the mock test lock and charge one mock test.
    Returns the test with its questions, without the answer key.
    """
    now = now or now_utc()
    if user.has_ongoing_mock_test(now):
        raise AlreadyOngoing(
            'You already have an ongoing mock test. Please complete it first.',
            ongoingTestId=user.ongoing_mock_test_id,
        )

    quota.reset_if_new_day(user, now)
    quota.ensure_quota(user, 'mockTests', now)

    mock_test = _get_mock_test(mock_test_id)
    if _attempted_record(user, mock_test.id):
        raise AlreadyAttempted('Mock test already attempted. You can only review answers.')

    user.ongoing_mock_test_id = mock_test.id
    user.ongoing_started_at = now
    user.ongoing_expires_at = now + timedelta(minutes=mock_test.duration)
    quota.consume(user, 'mockTests')
    commit_changes()

    current_app.logger.info(f"User {user.id} started mock test {mock_test.id}")

    questions = []
    for slot in mock_test.questions:
        data = slot.question.to_dict()
        data['serialNumber'] = slot.serial_number
        data['subject'] = slot.subject or data['subject']
        questions.append(data)

    payload = mock_test.summary_dict()
    payload['questions'] = questions
    payload['startedAt'] = user.ongoing_started_at.isoformat()
    payload['expiresAt'] = user.ongoing_expires_at.isoformat()
    return payload


def _is_late(user, now):
    grace = current_app.config.get('MOCK_TEST_SUBMIT_GRACE_SECONDS', 0)
    return now > user.ongoing_expires_at + timedelta(seconds=grace)


def submit(user, mock_test_id, answers, time_taken=None, now=None):
    """
    Score a submission (+4/-1), store it as the attempted record and release
    the lock.
    """
    now = now or now_utc()
    mock_test = _get_mock_test(mock_test_id, active_only=False)

    if user.ongoing_mock_test_id != mock_test.id or user.ongoing_expires_at is None:
        if _attempted_record(user, mock_test.id):
            raise AlreadyAttempted('Mock test already submitted')
        raise MockTestNotStarted('Start the mock test before submitting it')

    late = _is_late(user, now)
    if late and current_app.config.get('MOCK_TEST_ENFORCE_DEADLINE'):
        user.clear_ongoing_mock_test()
        commit_changes()
        raise SubmissionWindowClosed('The time for this mock test is over')

    detail, counts = evaluate_mock_answers(mock_test.questions, answers)
    record = MockTestRecord(
        user_id=user.id,
        mock_test_id=mock_test.id,
        mock_test_name=mock_test.name,
        exam=mock_test.exam,
        status='attempted',
        score=counts['score'],
        total_questions=len(mock_test.questions),
        correct_answers=counts['correct'],
        wrong_answers=counts['wrong'],
        unanswered=counts['unanswered'],
        time_taken=time_taken,
        submitted_late=late,
        attempted_at=now,
        answers=detail,
    )
    db.session.add(record)
    user.clear_ongoing_mock_test()
    commit_changes()

    if late:
        current_app.logger.info(f"User {user.id} submitted mock test {mock_test.id} after the deadline")
    return record.results_dict()


def review(user, mock_test_id):
    """Per-question review with the answer key, available once attempted"""
    mock_test = _get_mock_test(mock_test_id, active_only=False)
    record = _attempted_record(user, mock_test.id)
    if not record:
        raise NotAttempted('Mock test not attempted yet')

    stored = {row['questionNumber']: row for row in record.answers or []}
    questions = []
    for slot in mock_test.questions:
        data = slot.question.to_dict(reveal_answer=True)
        answer = stored.get(slot.serial_number, {})
        data['serialNumber'] = slot.serial_number
        data['subject'] = slot.subject or data['subject']
        data['selectedAnswer'] = answer.get('selectedAnswer')
        data['isCorrect'] = answer.get('isCorrect', False)
        questions.append(data)

    return {
        'mockTest': {'_id': mock_test.id, 'name': mock_test.name, 'exam': mock_test.exam},
        'results': record.results_dict(),
        'questions': questions,
        'explanationPdfUrl': mock_test.explanation_pdf_url,
    }

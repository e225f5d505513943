"""
Practice session service: question batches, answer verification, chapter
tests and attempt tracking.
"""
import random

from flask import current_app
from sqlalchemy import func, select

from models import db
from models.attempt import AttemptedQuestion
from models.question import Question
from utils import quota
from utils.db_helper import commit_changes
from utils.errors import InsufficientQuestions, InvalidInput, NotFound
from utils.evaluation import check_answer
from utils.timeutils import now_utc

DEFAULT_BATCH_SIZE = 30
CHAPTER_TEST_MCQ = 8
CHAPTER_TEST_NUMERICAL = 2


def _selected(values):
    """Filter values to apply, or None when absent or containing "all"."""
    if not values:
        return None
    values = [v for v in values if v]
    if not values or 'all' in values:
        return None
    return values


def _attempted_ids(user):
    """Subquery of question ids the user has already attempted"""
    return select(AttemptedQuestion.question_id).where(
        AttemptedQuestion.user_id == user.id,
        AttemptedQuestion.question_id.isnot(None),
    )


def _filtered_query(user, exam, subject, chapters=None, topics=None, question_types=None):
    query = Question.query.filter(
        Question.exam == exam,
        Question.subject == subject,
        Question.is_active.is_(True),
    )
    chapters = _selected(chapters)
    if chapters:
        query = query.filter(Question.chapter.in_(chapters))
    topics = _selected(topics)
    if topics:
        query = query.filter(Question.topic.in_(topics))
    question_types = _selected(question_types)
    if question_types:
        query = query.filter(Question.question_type.in_(question_types))

    query = query.filter(~Question.id.in_(_attempted_ids(user)))
    return query


def fetch_practice_batch(user, filters, offset=0, now=None):
    """
    Next batch of unattempted questions matching filters, ordered by id.
    Does not count against the daily quota.
    """
    if quota.reset_if_new_day(user, now):
        commit_changes()

    batch_size = current_app.config.get('PRACTICE_BATCH_SIZE', DEFAULT_BATCH_SIZE)
    questions = (
        _filtered_query(
            user, filters.exam, filters.subject,
            filters.chapters, filters.topics, filters.question_types,
        )
        .order_by(Question.id)
        .offset(max(offset or 0, 0))
        .limit(batch_size)
        .all()
    )
    return [q.to_dict() for q in questions]


def _record_attempt(user, question, is_correct, time_taken, now):
    db.session.add(AttemptedQuestion(
        user_id=user.id,
        question_id=question.id,
        subject=question.subject,
        chapter=question.chapter,
        topic=question.topic,
        is_correct=is_correct,
        attempted_at=now,
        time_taken=time_taken,
    ))
    quota.consume(user, 'questions')


def verify_answer(user, question_id, raw_answer, time_taken=None, now=None):
    """Check an answer, record the attempt and charge one question."""
    now = now or now_utc()
    quota.reset_if_new_day(user, now)
    quota.ensure_quota(user, 'questions', now)

    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound('Question not found')

    if raw_answer is None or str(raw_answer).strip() == '':
        raise InvalidInput('Answer is required')
    is_correct = check_answer(question, raw_answer)

    _record_attempt(user, question, is_correct, time_taken, now)
    commit_changes()

    return {
        'isCorrect': is_correct,
        'correctAnswer': question.correct_answer,
        'questionText': question.question_text,
        'options': question.options if question.is_mcq else None,
        'solution': question.solution,
    }


def generate_chapter_test(user, filters, now=None):
    """
    Ten random unattempted questions (8 MCQ, 2 numerical) in shuffled order.
    Charges one chapter test; attempts are not recorded here.
    """
    now = now or now_utc()
    quota.reset_if_new_day(user, now)
    quota.ensure_quota(user, 'chapterTests', now)

    def sample(question_type, size):
        return (
            _filtered_query(user, filters.exam, filters.subject, filters.chapters, filters.topics)
            .filter(Question.question_type == question_type)
            .order_by(func.random())
            .limit(size)
            .all()
        )

    mcq = sample('MCQ', CHAPTER_TEST_MCQ)
    numerical = sample('NUMERICAL', CHAPTER_TEST_NUMERICAL)
    questions = mcq + numerical
    if len(questions) < CHAPTER_TEST_MCQ + CHAPTER_TEST_NUMERICAL:
        raise InsufficientQuestions(
            'Not enough questions found for the selected filters',
            available=len(questions),
        )

    random.shuffle(questions)
    quota.consume(user, 'chapterTests')
    commit_changes()
    return [q.to_dict() for q in questions]


def track_question_attempt(user, question_id, is_correct, time_taken=None, now=None):
    """Record a question the client evaluated itself, e.g. inside a chapter test."""
    now = now or now_utc()
    quota.reset_if_new_day(user, now)
    quota.ensure_quota(user, 'questions', now)

    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound('Question not found')

    _record_attempt(user, question, bool(is_correct), time_taken, now)
    commit_changes()
    return quota.usage_summary(user, now)


def _distinct(column, **criteria):
    query = db.session.query(column).filter(Question.is_active.is_(True))
    for name, value in criteria.items():
        query = query.filter(getattr(Question, name) == value)
    return sorted(row[0] for row in query.distinct() if row[0])


def list_subjects(exam):
    return _distinct(Question.subject, exam=exam)


def list_chapters(exam, subject):
    return _distinct(Question.chapter, exam=exam, subject=subject)


def list_topics(exam, subject, chapter):
    return _distinct(Question.topic, exam=exam, subject=subject, chapter=chapter)


def question_image_url(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound('Question not found')
    return question.question_image_url


def attempted_question_stats(user):
    """Attempt history with totals, newest first"""
    attempts = (
        AttemptedQuestion.query
        .filter_by(user_id=user.id)
        .order_by(AttemptedQuestion.attempted_at.desc(), AttemptedQuestion.id.desc())
        .all()
    )
    correct = sum(1 for a in attempts if a.is_correct)
    return {
        'attemptedQuestions': [a.to_dict() for a in attempts],
        'total': len(attempts),
        'correct': correct,
        'wrong': len(attempts) - correct,
    }


def subject_analytics(user):
    """Per-subject attempted/correct/wrong counts, accuracy and average time"""
    attempts = AttemptedQuestion.query.filter_by(user_id=user.id).all()
    stats = {}
    for attempt in attempts:
        subject = attempt.subject or 'Unknown'
        entry = stats.setdefault(subject, {'attempted': 0, 'correct': 0, 'wrong': 0, 'total_time': 0})
        entry['attempted'] += 1
        if attempt.is_correct:
            entry['correct'] += 1
        else:
            entry['wrong'] += 1
        entry['total_time'] += attempt.time_taken or 0

    analytics = []
    for subject, entry in sorted(stats.items()):
        attempted = entry['attempted']
        analytics.append({
            'subject': subject,
            'totalAttempted': attempted,
            'correct': entry['correct'],
            'wrong': entry['wrong'],
            'accuracy': round(entry['correct'] / attempted * 100, 2) if attempted else 0,
            'avgTime': round(entry['total_time'] / attempted, 2) if attempted else 0,
        })
    return {
        'analytics': analytics,
        'totalQuestionsAttempted': len(attempts),
        'mockTestsAttempted': len([r for r in user.mock_test_records if r.status == 'attempted']),
    }

"""
User profile routes: profile, onboarding details, exam choice and daily limits
"""
from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from utils import practice, quota
from utils.db_helper import commit_changes
from utils.schemas import CompleteDetailsRequest, SelectExamRequest, TrackAttemptRequest, parse_body
from utils.subscription_helper import is_active
from utils.timeutils import isoformat

profile_bp = Blueprint('user_profile', __name__, url_prefix='/api/user')


def _refresh_daily_usage(user):
    """Apply the IST midnight reset before reporting usage"""
    if quota.reset_if_new_day(user):
        commit_changes()


@profile_bp.route('/profile')
@login_required
def profile():
    user = current_user
    _refresh_daily_usage(user)
    return jsonify({
        'success': True,
        'user': {
            'userId': user.user_uid,
            'email': user.email,
            'name': user.name,
            'subscriptionType': user.subscription_type,
            'subscriptionExpiryDate': isoformat(user.subscription_expiry_date),
            'isSubscriptionActive': is_active(user),
            'userDetailsCompleted': user.user_details_completed,
            'selectedExam': user.selected_exam,
            'profession': user.profession,
            'grade': user.grade,
            'preparingFor': user.preparing_for,
            'collegeName': user.college_name,
            'schoolName': user.school_name,
            'state': user.state,
            'lifeAmbition': user.life_ambition,
            'dailyUsage': user.daily_usage_dict(),
            'dailyLimits': quota.get_user_limits(user),
            'ongoingMockTest': user.ongoing_mock_test_dict() if user.has_ongoing_mock_test() else None,
        }
    })


@profile_bp.route('/complete-details', methods=['POST'])
@login_required
def complete_details():
    """Save onboarding details"""
    body = parse_body(CompleteDetailsRequest)
    user = current_user
    user.name = body.name
    user.profession = body.profession
    user.grade = body.grade if body.profession == 'student' else 'other'
    user.preparing_for = body.preparing_for
    user.college_name = body.college_name
    user.school_name = body.school_name
    user.state = body.state
    user.life_ambition = body.life_ambition
    user.user_details_completed = True
    commit_changes()

    return jsonify({
        'success': True,
        'message': 'User details saved successfully',
        'user': {
            'name': user.name,
            'profession': user.profession,
            'grade': user.grade,
            'preparingFor': user.preparing_for,
            'userDetailsCompleted': user.user_details_completed,
        }
    })


@profile_bp.route('/select-exam', methods=['POST'])
@login_required
def select_exam():
    body = parse_body(SelectExamRequest)
    current_user.selected_exam = body.exam
    commit_changes()
    return jsonify({
        'success': True,
        'message': 'Exam selected successfully',
        'selectedExam': current_user.selected_exam,
    })


@profile_bp.route('/check-limits')
@login_required
def check_limits():
    """Limits, usage and can-attempt flags for today"""
    _refresh_daily_usage(current_user)
    summary = quota.usage_summary(current_user)
    return jsonify({'success': True, 'subscriptionType': current_user.subscription_type, **summary})


@profile_bp.route('/track-question-attempt', methods=['POST'])
@login_required
def track_question_attempt():
    body = parse_body(TrackAttemptRequest)
    summary = practice.track_question_attempt(
        current_user, body.question_id, body.is_correct, body.time_taken
    )
    return jsonify({
        'success': True,
        'message': 'Question attempt tracked',
        'usage': {
            'questionsAttempted': summary['usage']['questionsAttempted'],
            'limit': summary['limits']['questions'],
        }
    })


@profile_bp.route('/attempted-questions')
@login_required
def attempted_questions():
    stats = practice.attempted_question_stats(current_user)
    return jsonify({
        'success': True,
        'attemptedQuestions': stats['attemptedQuestions'],
        'stats': {'total': stats['total'], 'correct': stats['correct'], 'wrong': stats['wrong']},
    })

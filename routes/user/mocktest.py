"""
User mock test routes
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from utils import mock_test_session
from utils.errors import InvalidInput
from utils.schemas import SubmitMockTestRequest, parse_body

mocktest_bp = Blueprint('user_mocktest', __name__, url_prefix='/api/mocktest')


@mocktest_bp.route('/list')
@login_required
def list_mock_tests():
    """Mock tests for an exam with the user's status"""
    exam = request.args.get('exam', '').strip()
    if not exam:
        raise InvalidInput('Exam parameter is required')
    return jsonify({'success': True, 'mockTests': mock_test_session.list_mock_tests(current_user, exam)})


@mocktest_bp.route('/<int:mock_test_id>/start', methods=['POST'])
@login_required
def start(mock_test_id):
    mock_test = mock_test_session.start(current_user, mock_test_id)
    return jsonify({
        'success': True,
        'mockTest': mock_test,
        'message': 'Mock test started. All data loaded for offline use.',
    })


@mocktest_bp.route('/<int:mock_test_id>/submit', methods=['POST'])
@login_required
def submit(mock_test_id):
    body = parse_body(SubmitMockTestRequest)
    results = mock_test_session.submit(current_user, mock_test_id, body.answer_dicts(), body.time_taken)
    return jsonify({
        'success': True,
        'message': 'Mock test submitted successfully',
        'results': results,
    })


@mocktest_bp.route('/<int:mock_test_id>/review')
@login_required
def review(mock_test_id):
    """Answers and solutions for an attempted mock test"""
    return jsonify({'success': True, **mock_test_session.review(current_user, mock_test_id)})

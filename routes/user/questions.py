"""
User question practice routes
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from utils import practice
from utils.errors import InvalidInput
from utils.schemas import PracticeRequest, QuestionFilters, VerifyAnswerRequest, parse_body

questions_bp = Blueprint('user_questions', __name__, url_prefix='/api/questions')


def _require_args(*names):
    values = [request.args.get(name, '').strip() for name in names]
    if not all(values):
        raise InvalidInput(f"{', '.join(n.title() for n in names)} required")
    return values


@questions_bp.route('/filters')
@login_required
def filters():
    """Subjects available for an exam"""
    exam, = _require_args('exam')
    return jsonify({'success': True, 'subjects': practice.list_subjects(exam)})


@questions_bp.route('/chapters')
@login_required
def chapters():
    exam, subject = _require_args('exam', 'subject')
    return jsonify({'success': True, 'chapters': practice.list_chapters(exam, subject)})


@questions_bp.route('/topics')
@login_required
def topics():
    exam, subject, chapter = _require_args('exam', 'subject', 'chapter')
    return jsonify({'success': True, 'topics': practice.list_topics(exam, subject, chapter)})


@questions_bp.route('/practice', methods=['POST'])
@login_required
def practice_questions():
    """Next batch of unattempted practice questions"""
    body = parse_body(PracticeRequest)
    questions = practice.fetch_practice_batch(current_user, body, offset=body.offset)
    return jsonify({'success': True, 'questions': questions, 'count': len(questions)})


@questions_bp.route('/verify-answer', methods=['POST'])
@login_required
def verify_answer():
    body = parse_body(VerifyAnswerRequest)
    result = practice.verify_answer(current_user, body.question_id, body.user_answer, body.time_taken)
    return jsonify({'success': True, **result})


@questions_bp.route('/generate-test', methods=['POST'])
@login_required
def generate_test():
    """Ten-question chapter test"""
    body = parse_body(QuestionFilters)
    questions = practice.generate_chapter_test(current_user, body)
    return jsonify({'success': True, 'questions': questions})


@questions_bp.route('/<int:question_id>/image')
@login_required
def question_image(question_id):
    return jsonify({'success': True, 'imageUrl': practice.question_image_url(question_id)})

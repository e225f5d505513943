"""
User feedback routes
"""
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from models import db
from models.feedback import Feedback
from utils.db_helper import commit_changes
from utils.notifications import notify_feedback_submitted
from utils.schemas import FeedbackRequest, parse_body

feedback_bp = Blueprint('user_feedback', __name__, url_prefix='/api/feedback')


@feedback_bp.route('/submit', methods=['POST'])
@login_required
def submit():
    """Store a query or refund feedback; refund feedback starts as incomplete"""
    body = parse_body(FeedbackRequest)
    feedback = Feedback(
        user_id=current_user.id,
        email=current_user.email,
        phone=current_user.phone,
        feedback_type=body.feedback_type,
        message=body.message,
        rating=body.rating,
        refund_status='incomplete' if body.feedback_type == 'refund' else None,
    )
    db.session.add(feedback)
    commit_changes()

    current_app.logger.info(f"Feedback {feedback.id} ({feedback.feedback_type}) from user {current_user.id}")
    notify_feedback_submitted(feedback, current_user)

    return jsonify({
        'success': True,
        'message': 'Feedback submitted successfully',
        'feedback': feedback.to_dict(),
    })

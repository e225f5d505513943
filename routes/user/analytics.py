"""
User analytics routes
"""
from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from utils.practice import subject_analytics

analytics_bp = Blueprint('user_analytics', __name__, url_prefix='/api/analytics')


@analytics_bp.route('/overview')
@login_required
def overview():
    """Subject-wise accuracy and timing"""
    return jsonify({'success': True, **subject_analytics(current_user)})

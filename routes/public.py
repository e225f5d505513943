"""
Public routes: service info and health check
"""
from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from models import db

public_bp = Blueprint('public', __name__)


@public_bp.route('/')
def home():
    """Service banner"""
    return jsonify({
        'success': True,
        'message': 'Exam prep API is running',
        'exams': ['JEE', 'NEET'],
    })


@public_bp.route('/api/health')
def health():
    """Liveness plus a database round trip"""
    try:
        db.session.execute(text('SELECT 1'))
        database = 'ok'
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Health check database error: {str(e)}", exc_info=True)
        database = 'unavailable'

    status = 200 if database == 'ok' else 503
    return jsonify({'success': database == 'ok', 'database': database}), status

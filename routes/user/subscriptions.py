"""
User subscription routes: plan catalogue and gift codes
"""
from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from utils.schemas import GiftCodeRequest, parse_body
from utils.subscription_helper import apply_gift_code, get_plans

subscriptions_bp = Blueprint('user_subscriptions', __name__, url_prefix='/api/subscription')


@subscriptions_bp.route('/apply-giftcode', methods=['POST'])
@login_required
def apply_giftcode():
    """Redeem a gift code for a gold plan"""
    body = parse_body(GiftCodeRequest)
    subscription = apply_gift_code(current_user, body.code)
    return jsonify({
        'success': True,
        'message': 'Gift code applied successfully',
        'subscription': subscription,
    })


@subscriptions_bp.route('/plans')
@login_required
def plans():
    return jsonify({'success': True, 'plans': get_plans()})

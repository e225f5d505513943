"""
User payment routes: plan orders, payment verification and refunds
"""
from datetime import timedelta
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from models import db
from models.payment import Payment
from utils.db_helper import commit_changes
from utils.errors import InvalidInput, NotFound
from utils.payment_gateway import CURRENCY, generate_order_reference, to_paise, verify_payment_signature
from utils.refund import refund_quote, request_refund
from utils.schemas import CreateOrderRequest, VerifyPaymentRequest, parse_body
from utils.subscription_helper import activate_paid_plan, duration_days, get_plan_price
from utils.timeutils import isoformat, now_utc

payment_bp = Blueprint('user_payment', __name__, url_prefix='/api/payment')


@payment_bp.route('/create-order', methods=['POST'])
@login_required
def create_order():
    """Create a pending order for a plan at the catalogue price"""
    body = parse_body(CreateOrderRequest)
    price = get_plan_price(body.plan_type, body.duration)
    if price is None:
        raise InvalidInput('Unknown plan')
    if body.amount is not None and body.amount != price:
        raise InvalidInput(f"Amount does not match the plan price of ₹{price}")

    payment = Payment(
        user_id=current_user.id,
        gateway_order_id=generate_order_reference(),
        amount_paid=price,
        plan_type=body.plan_type,
        plan_duration=body.duration,
        plan_duration_days=duration_days(body.duration),
        status='pending',
    )
    db.session.add(payment)
    commit_changes()

    current_app.logger.info(f"Order {payment.gateway_order_id} created for user {current_user.id}")
    return jsonify({
        'success': True,
        'orderId': payment.gateway_order_id,
        'amount': to_paise(price),
        'currency': CURRENCY,
        'keyId': current_app.config.get('PAYMENT_GATEWAY_KEY_ID'),
    })


@payment_bp.route('/verify', methods=['POST'])
@login_required
def verify():
    """Check the gateway signature and activate the paid plan"""
    body = parse_body(VerifyPaymentRequest)
    if not verify_payment_signature(body.order_id, body.payment_id, body.signature):
        raise InvalidInput('Invalid payment signature')

    payment = Payment.query.filter_by(gateway_order_id=body.order_id, user_id=current_user.id).first()
    if not payment:
        raise NotFound('Order not found')

    if payment.status == 'success':
        if payment.gateway_payment_id != body.payment_id:
            raise InvalidInput('Order has already been paid')
        return jsonify({
            'success': True,
            'message': 'Payment already verified',
            'subscription': {'type': payment.plan_type, 'expiryDate': isoformat(payment.plan_expiry_date)},
            'payment': payment.to_dict(),
        })

    now = now_utc()
    payment.gateway_payment_id = body.payment_id
    payment.gateway_signature = body.signature
    payment.plan_start_date = now
    payment.plan_expiry_date = now + timedelta(days=payment.plan_duration_days or duration_days(payment.plan_duration))
    payment.status = 'success'
    activate_paid_plan(current_user, payment)
    commit_changes()

    current_app.logger.info(f"Payment {payment.id} verified for user {current_user.id}")

    # Notify admins of new payment
    try:
        from utils.mail import send_payment_notification
        send_payment_notification(payment, current_user)
    except Exception as e:
        current_app.logger.error(f"Failed to send admin notification for payment: {str(e)}", exc_info=True)
        # Don't fail payment if notification fails

    try:
        from utils.notifications import notify_payment_verified
        notify_payment_verified(payment, current_user)
    except Exception as e:
        current_app.logger.error(f"Failed to create admin notification for payment: {str(e)}", exc_info=True)

    return jsonify({
        'success': True,
        'message': 'Payment verified successfully',
        'subscription': {
            'type': payment.plan_type,
            'expiryDate': isoformat(payment.plan_expiry_date),
            'duration': payment.plan_duration,
        },
        'payment': payment.to_dict(),
    })


@payment_bp.route('/refund/calculate', methods=['POST'])
@login_required
def calculate_refund():
    quote, _ = refund_quote(current_user, now_utc())
    return jsonify({'success': True, **quote})


@payment_bp.route('/refund/request', methods=['POST'])
@login_required
def refund_request():
    """File a refund request for the latest eligible payment"""
    quote = request_refund(current_user)
    if not quote['eligible']:
        return jsonify({'success': True, **quote})
    return jsonify({
        'success': True,
        'message': 'Refund request submitted. It will be processed by our team.',
        'refund': {
            'amount': quote['refundAmount'],
            'percent': quote['refundPercent'],
            'status': quote['refundStatus'],
        },
        **quote,
    })

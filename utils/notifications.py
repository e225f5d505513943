"""
Admin notification utility functions
"""
from models import db
from models.admin_notification import AdminNotification
from flask import current_app


def create_notification(notification_type, title, message, related_id=None):
    """
    Create a new admin notification

    Args:
        notification_type: 'payment', 'refund', 'giftcode', 'feedback' or 'system'
        title: Notification title
        message: Notification message
        related_id: Optional ID of related entity (payment_id, user_id)

    Returns:
        AdminNotification object or None if creation failed
    """
    try:
        notification = AdminNotification(
            type=notification_type,
            title=title,
            message=message,
            related_id=related_id,
            is_read=False
        )
        db.session.add(notification)
        db.session.commit()
        return notification
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create notification: {str(e)}", exc_info=True)
        return None


def _display_name(user):
    return user.name or user.email


def notify_payment_verified(payment, user):
    """Create notification for a verified plan payment"""
    title = "Payment Received"
    message = (
        f"User {_display_name(user)} paid ₹{payment.amount_paid} for "
        f"{payment.plan_type.title()} ({payment.plan_duration})"
    )
    return create_notification('payment', title, message, related_id=payment.id)


def notify_gift_code_redeemed(gift_code, user):
    """Create notification for a redeemed gift code"""
    title = "Gift Code Redeemed"
    message = f"User {_display_name(user)} redeemed gift code {gift_code.code} ({gift_code.duration})"
    return create_notification('giftcode', title, message, related_id=user.id)


def notify_refund_requested(user, payment):
    """Create notification for a refund request"""
    title = "Refund Requested"
    message = (
        f"User {_display_name(user)} requested a refund of ₹{payment.refund_amount} "
        f"({payment.refund_percent}%) on payment #{payment.id}"
    )
    return create_notification('refund', title, message, related_id=payment.id)


def notify_feedback_submitted(feedback, user):
    """Create notification for new user feedback"""
    title = "Refund Feedback" if feedback.feedback_type == 'refund' else "New Query"
    rating = f" ({feedback.rating}/5)" if feedback.rating else ""
    message = f"User {_display_name(user)} left {feedback.feedback_type} feedback{rating}"
    return create_notification('feedback', title, message, related_id=feedback.id)

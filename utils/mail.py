"""
Email utility functions
"""
from flask_mail import Mail, Message
from markupsafe import escape
from flask import current_app

mail = Mail()


def send_email(subject, recipients, body, html=None):
    """
    Send an email

    Args:
        subject: Email subject
        recipients: List of recipient email addresses
        body: Plain text body
        html: HTML body (optional)
    """
    msg = Message(
        subject=subject,
        recipients=recipients,
        body=body,
        html=html
    )
    mail.send(msg)


def get_admin_emails():
    """Get list of active admin email addresses for notifications"""
    try:
        from models.admin import Admin
        admins = Admin.query.filter_by(is_active=True).all()
        return [admin.email for admin in admins]
    except Exception:
        return []


def send_admin_notification(subject, body, html=None):
    """
    Send notification email to all active admins.
    Silently skipped if mail is not configured.
    """
    if not current_app.config.get('MAIL_SERVER'):
        return False

    admin_emails = get_admin_emails()
    if not admin_emails:
        return False

    try:
        send_email(subject, admin_emails, body, html)
        return True
    except Exception as e:
        current_app.logger.error(f"Error sending admin notification: {str(e)}", exc_info=True)
        # Don't raise - admin notifications are non-critical
        return False


def _format_date(value):
    return value.strftime('%Y-%m-%d') if value else 'N/A'


def send_payment_notification(payment, user):
    """Notify admins of a verified plan payment"""
    subject = f"New Payment Received - ₹{payment.amount_paid}"
    rows = [
        ('User', f"{user.name or 'N/A'} ({user.email})"),
        ('Plan', f"{payment.plan_type.title()} ({payment.plan_duration})"),
        ('Amount', f"₹{payment.amount_paid}"),
        ('Order', payment.gateway_order_id or 'N/A'),
        ('Payment', payment.gateway_payment_id or 'N/A'),
        ('Valid Until', _format_date(payment.plan_expiry_date)),
    ]
    body = "A new payment has been received:\n\n" + _text_rows(rows)
    html = _table_email_html("New Payment Received", "A new payment has been received:", rows)
    return send_admin_notification(subject, body, html)


def send_refund_request_notification(user, payment):
    """Notify admins that a user asked for a refund"""
    subject = f"Refund Request - ₹{payment.refund_amount}"
    rows = [
        ('User', f"{user.name or 'N/A'} ({user.email})"),
        ('User ID', user.user_uid),
        ('Plan', f"{payment.plan_type.title()} ({payment.plan_duration})"),
        ('Amount Paid', f"₹{payment.amount_paid}"),
        ('Refund', f"₹{payment.refund_amount} ({payment.refund_percent}%)"),
        ('Payment', payment.gateway_payment_id or 'N/A'),
        ('Requested', _format_date(payment.refund_date)),
    ]
    body = "A refund has been requested:\n\n" + _text_rows(rows) + "\n\nProcess the refund with the payment gateway."
    html = _table_email_html("Refund Request", "A refund has been requested:", rows)
    return send_admin_notification(subject, body, html)


def _text_rows(rows):
    return "\n".join(f"{label}: {value}" for label, value in rows)


def _table_email_html(title: str, intro: str, rows) -> str:
    """HTML template for admin notification mail; row values are escaped"""
    cells = "".join(
        f'<tr><td style="padding: 8px; border-bottom: 1px solid #eee;"><strong>{escape(label)}:</strong></td>'
        f'<td style="padding: 8px; border-bottom: 1px solid #eee;">{escape(value)}</td></tr>'
        for label, value in rows
    )
    return f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>{title}</title></head>
    <body style="font-family: system-ui, sans-serif; max-width: 600px; margin: 0 auto; padding: 24px;">
        <h2 style="color: #1a1a2e;">{title}</h2>
        <p>{intro}</p>
        <table style="width: 100%; border-collapse: collapse; margin: 20px 0;">
            {cells}
        </table>
    </body>
    </html>
    """

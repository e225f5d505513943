"""
Authentication utility functions
"""
import hmac
import base64
import time
from flask import current_app

# Access token lifetime: 7 days unless configured
DEFAULT_ACCESS_TOKEN_LIFETIME_SECONDS = 7 * 24 * 60 * 60


def _sign(payload):
    key = current_app.config.get("SECRET_KEY", "").encode("utf-8")
    return hmac.new(key, payload.encode("utf-8"), "sha256").hexdigest()


def generate_access_token(user, lifetime=None):
    """
    Generate a bearer token for user.
    Returns a signed user_id|user_uid|expiry token.
    """
    if lifetime is None:
        lifetime = current_app.config.get(
            "ACCESS_TOKEN_LIFETIME_SECONDS", DEFAULT_ACCESS_TOKEN_LIFETIME_SECONDS
        )
    expiry = int(time.time()) + int(lifetime)
    payload = f"{user.id}|{user.user_uid}|{expiry}"
    raw = f"{payload}|{_sign(payload)}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("utf-8").rstrip("=")


def verify_access_token(token):
    """
    Verify a bearer token and return the active user if valid, else None.
    Checks signature, expiry and that the user still exists.
    """
    from models import db
    from models.user import User

    if not token or not isinstance(token, str):
        return None

    try:
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)).decode("utf-8")
        parts = raw.rsplit("|", 1)
        if len(parts) != 2:
            return None

        payload, sig = parts
        if not hmac.compare_digest(sig, _sign(payload)):
            return None

        user_id_str, user_uid, expiry_str = payload.split("|", 2)
        if int(expiry_str) < int(time.time()):
            return None

        user = db.session.get(User, int(user_id_str))
        if not user or user.user_uid != user_uid or not user.is_active:
            return None

        return user
    except (ValueError, UnicodeDecodeError):
        return None


def token_from_header(header_value):
    """Extract the token from an 'Authorization: Bearer <token>' value"""
    if not header_value:
        return None
    scheme, _, token = header_value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

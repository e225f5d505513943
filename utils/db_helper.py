"""
Commit helper for user-aggregate writes.

The users row is versioned (see models.user), so a commit that raced another
writer for the same user fails instead of overwriting it.
"""
from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from models import db
from utils.errors import ConcurrentUpdate


def commit_changes():
    """Commit the session; roll back and raise ConcurrentUpdate on a lost race."""
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        current_app.logger.warning("Concurrent update detected; changes rolled back")
        raise ConcurrentUpdate("Your account was updated by another request. Please retry.")
    except Exception:
        db.session.rollback()
        raise

"""
Admin model definition
"""
from models import db
from utils.timeutils import now_utc


class Admin(db.Model):
    """Staff account; active admins receive notification mail"""
    __tablename__ = 'admins'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(100))
    role = db.Column(db.String(20), default='admin')  # admin, co-admin
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=now_utc)

    def __repr__(self):
        return f'<Admin {self.email}>'

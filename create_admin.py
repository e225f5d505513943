"""
Script to create or re-activate the admin who receives payment and refund mail
Usage: python create_admin.py [email] [name]
"""
import sys

from app import create_app
from models import db
from models.admin import Admin

DEFAULT_EMAIL = 'admin@examprep.local'
DEFAULT_NAME = 'Main Administrator'


def create_admin(email=DEFAULT_EMAIL, name=DEFAULT_NAME):
    """Create the admin row, or re-activate it if it already exists"""
    app = create_app()

    with app.app_context():
        email = email.strip().lower()
        admin = Admin.query.filter_by(email=email).first()

        if admin:
            admin.is_active = True
            admin.role = 'admin'
            if name:
                admin.name = name
            db.session.commit()
            print(f"[SUCCESS] Admin {email} re-activated")
        else:
            admin = Admin(email=email, name=name, role='admin', is_active=True)
            db.session.add(admin)
            db.session.commit()
            print(f"[SUCCESS] Admin {email} created")

        active = Admin.query.filter_by(is_active=True).count()
        print(f"Active admins receiving notifications: {active}")
        return admin


if __name__ == '__main__':
    create_admin(*sys.argv[1:3])

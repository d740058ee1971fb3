from datetime import datetime
import secrets
from flask import current_app
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from libraryhub import db

class User(UserMixin, db.Model):
    __tablename__ = 'users'

    ROLES = ['admin', 'staff']

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100))

    # admin: full access, staff: everything except applying collection payments
    role = db.Column(db.String(20), nullable=False, default='staff')

    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    def set_password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check password against hash"""
        return check_password_hash(self.password_hash, password)

    def is_admin(self):
        return self.role == 'admin'

    def update_last_login(self):
        self.last_login = datetime.utcnow()
        db.session.commit()

    @staticmethod
    def create_default_admin():
        """
        Create the default admin account if no user with that username exists

        Returns:
            Tuple of (user, generated_password). The password is None when the
            user already existed.
        """
        username = current_app.config.get('DEFAULT_ADMIN_USERNAME', 'admin')
        existing = User.query.filter_by(username=username).first()
        if existing:
            return existing, None

        password = current_app.config.get('DEFAULT_ADMIN_PASSWORD') or secrets.token_urlsafe(12)
        admin = User(username=username, full_name='Administrator', role='admin', is_active=True)
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()
        return admin, password

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'full_name': self.full_name,
            'role': self.role,
            'is_active': self.is_active,
            'last_login': self.last_login.isoformat() if self.last_login else None
        }

    def __repr__(self):
        return f'<User {self.username}>'

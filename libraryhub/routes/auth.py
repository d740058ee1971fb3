from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, current_user, login_required
from libraryhub.models.user import User
from libraryhub.services.error_service import (
    handle_errors, ValidationError, UnauthorizedError, ForbiddenError
)

bp = Blueprint('auth', __name__)

@bp.route('/login', methods=['POST'])
@handle_errors
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        raise ValidationError('Username and password are required')

    user = User.query.filter(User.username.ilike(username)).first()
    if user is None or not user.check_password(password):
        current_app.logger.warning(f"Failed login attempt for '{username}'")
        raise UnauthorizedError('Invalid username or password')

    if not user.is_active:
        current_app.logger.warning(f"Login attempt on deactivated account '{user.username}'")
        raise ForbiddenError('Your account has been deactivated. Please contact administrator.')

    login_user(user, remember=bool(data.get('remember_me')))
    user.update_last_login()
    current_app.logger.info(f"User {user.username} logged in")

    return jsonify({'success': True, 'user': user.to_dict()})

@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    username = current_user.username
    logout_user()
    current_app.logger.info(f"User {username} logged out")
    return jsonify({'success': True, 'message': 'Logged out'})

@bp.route('/status')
def status():
    if not current_user.is_authenticated:
        return jsonify({'authenticated': False})
    return jsonify({'authenticated': True, 'user': current_user.to_dict()})

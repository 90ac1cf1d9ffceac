"""
Authentication Routes Blueprint

Handles signup, login/logout, the profile of the logged-in user and
user management API endpoints.
"""

from flask import Blueprint, render_template, request, jsonify, redirect, url_for
import logging

import auth
from database.connection import get_db_session
from services.users_repository import UsersRepository
from validators import (
    ValidationError, validate_credentials, validate_role, sanitize_string, MIN_PASSWORD_LENGTH
)
from app.api.responses import ok, not_found, api_error
from app.utils.helpers import get_json_body, notification

logger = logging.getLogger(__name__)

# Create blueprint
auth_bp = Blueprint('auth_bp', __name__)


def _redirect_target(user):
    return '/admin' if user.role == 'admin' else '/profile'


# ============================================================================
# LOGIN/LOGOUT ROUTES
# ============================================================================

@auth_bp.route('/login')
def login_page():
    """Login page"""
    if auth.is_authenticated():
        return redirect(url_for('pages.profile'))
    return render_template('login.html', next_url=request.args.get('next', ''))


@auth_bp.route('/signup')
def signup_page():
    """Signup page"""
    if auth.is_authenticated():
        return redirect(url_for('pages.profile'))
    return render_template('signup.html')


@auth_bp.route('/api/auth/signup', methods=['POST'])
def api_signup():
    """Create a customer account and start its session"""
    try:
        data = get_json_body()
        email, password = validate_credentials(data)
        display_name = sanitize_string(data.get('display_name') or '', 255) or None
        with get_db_session() as db:
            repo = UsersRepository(db)
            repo.create_user(email, password, display_name=display_name, role='user')
            user, _ = repo.authenticate(email, password)
            auth.login_user(user)
            profile = user.to_dict()
        return ok(
            {'user': profile, 'redirect': '/profile'}, 201, 'Cuenta Creada',
            'Tu cuenta ha sido creada exitosamente. Redirigiendo a tu panel...'
        )
    except Exception as e:
        return api_error(e, "signing up")


@auth_bp.route('/api/auth/login', methods=['POST'])
def api_login():
    """API endpoint for user login"""
    try:
        data = get_json_body()
        email = (data.get('email') or '').strip()
        password = data.get('password') or ''
        if not email or not password:
            raise ValidationError('Correo y contraseña son obligatorios', 'email')

        with get_db_session() as db:
            user, error = UsersRepository(db).authenticate(email, password)
            if error:
                logger.info(f"Failed login for {email}")
                return jsonify({
                    'success': False,
                    'error': error,
                    'notification': notification('Error', error, 'destructive')
                }), 401
            auth.login_user(user)
            profile = user.to_dict()
            target = _redirect_target(user)

        return ok({'user': profile, 'redirect': target})
    except Exception as e:
        return api_error(e, "logging in")


@auth_bp.route('/api/auth/logout', methods=['POST'])
def api_logout():
    """API endpoint for user logout"""
    auth.logout_user()
    return ok(title='Sesión cerrada', description='Has cerrado sesión correctamente.')


@auth_bp.route('/logout')
def logout():
    auth.logout_user()
    return redirect(url_for('pages.index'))


# ============================================================================
# PROFILE
# ============================================================================

@auth_bp.route('/api/auth/me', methods=['GET'])
@auth.login_required
def get_profile():
    """Profile of the logged-in user"""
    try:
        with get_db_session() as db:
            user = UsersRepository(db).sync_profile(auth.get_current_user_id())
        if not user:
            auth.logout_user()
            return jsonify({'success': False, 'error': 'Authentication required', 'redirect': '/login'}), 401
        return ok({'user': user})
    except Exception as e:
        return api_error(e, "loading profile")


@auth_bp.route('/api/auth/me', methods=['PUT', 'PATCH'])
@auth.login_required
def update_profile():
    """Update the display name of the logged-in user"""
    try:
        data = get_json_body()
        display_name = sanitize_string(data.get('display_name') or '', 255)
        if len(display_name) < 2:
            raise ValidationError('display_name must be at least 2 characters', 'display_name')
        with get_db_session() as db:
            user = UsersRepository(db).sync_profile(auth.get_current_user_id(), display_name)
        if not user:
            return not_found('Usuario no encontrado.')
        return ok({'user': user}, title='Perfil actualizado', description=display_name)
    except Exception as e:
        return api_error(e, "updating profile")


# ============================================================================
# USER MANAGEMENT API (Admin only)
# ============================================================================

@auth_bp.route('/api/auth/users', methods=['GET'])
@auth.admin_required
def get_users():
    """Get all users (admin only)"""
    try:
        with get_db_session() as db:
            users = UsersRepository(db).list_users(
                active_only=request.args.get('active_only', 'false').lower() == 'true',
                role=request.args.get('role')
            )
        return ok({'users': users, 'count': len(users)})
    except Exception as e:
        return api_error(e, "listing users")


@auth_bp.route('/api/auth/users/<user_id>', methods=['GET'])
@auth.admin_required
def get_user(user_id):
    """Get specific user (admin only)"""
    try:
        with get_db_session() as db:
            user = UsersRepository(db).get_user(user_id)
        if not user:
            return not_found('Usuario no encontrado.')
        return ok({'user': user})
    except Exception as e:
        return api_error(e, f"getting user {user_id}")


@auth_bp.route('/api/auth/users', methods=['POST'])
@auth.admin_required
def create_user_api():
    """Create a team member (admin role unless another role is given)"""
    try:
        data = get_json_body()
        email, password = validate_credentials(data)
        role = validate_role(data.get('role') or 'admin')
        display_name = sanitize_string(data.get('display_name') or '', 255) or None
        with get_db_session() as db:
            user = UsersRepository(db).create_user(email, password, display_name=display_name, role=role)
        return ok(
            {'user': user}, 201, 'Usuario Administrador Creado',
            f"La cuenta para {user['email']} ha sido creada con éxito."
        )
    except Exception as e:
        return api_error(e, "creating user")


@auth_bp.route('/api/auth/users/<user_id>', methods=['PUT', 'PATCH'])
@auth.admin_required
def update_user_api(user_id):
    """Change role, active flag, display name or password (admin only)"""
    try:
        data = get_json_body()
        changes = {}
        if 'role' in data:
            changes['role'] = validate_role(data['role'])
        if 'is_active' in data:
            if not isinstance(data['is_active'], bool):
                raise ValidationError('is_active must be a boolean', 'is_active')
            changes['is_active'] = data['is_active']
        if data.get('display_name'):
            changes['display_name'] = sanitize_string(data['display_name'], 255)
        if data.get('password'):
            if len(data['password']) < MIN_PASSWORD_LENGTH:
                raise ValidationError(
                    f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.", 'password'
                )
            changes['password'] = data['password']

        with get_db_session() as db:
            user = UsersRepository(db).update_user(user_id, changes)
        if not user:
            return not_found('Usuario no encontrado.')
        return ok({'user': user}, title='Usuario actualizado', description=user['email'])
    except Exception as e:
        return api_error(e, f"updating user {user_id}")


@auth_bp.route('/api/auth/users/<user_id>', methods=['DELETE'])
@auth.admin_required
def delete_user_api(user_id):
    """Deactivate a user (admin only)"""
    try:
        with get_db_session() as db:
            deleted = UsersRepository(db).delete_user(user_id)
        if not deleted:
            return not_found('Usuario no encontrado.')
        return ok(title='Usuario desactivado', description='La cuenta fue desactivada.')
    except Exception as e:
        return api_error(e, f"deleting user {user_id}")

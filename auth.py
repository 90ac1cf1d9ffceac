"""
User Authentication and Authorization Module
Handles login sessions and role checks. Customers have the 'user' role,
back-office staff have the 'admin' role.
"""
from functools import wraps
from flask import session, redirect, url_for, jsonify, request
import logging

from database.connection import get_db_session
from services.users_repository import UsersRepository
from security import report_permission_error, permission_denied_response

logger = logging.getLogger(__name__)

ROLES = {
    'user': 'Cliente',
    'admin': 'Administrador',
}


def login_user(user):
    """Set user session"""
    session['user_id'] = user.id
    session['user_email'] = user.email
    session['user_display_name'] = user.display_name
    session['user_role'] = user.role
    session.permanent = True


def logout_user():
    """Clear user session"""
    session.clear()


def get_current_user():
    """Get currently logged in user as a dict (None when logged out or deactivated)"""
    user_id = session.get('user_id')
    if not user_id:
        return None
    with get_db_session() as db:
        user = UsersRepository(db).get_user(user_id)
    if not user or not user['is_active']:
        return None
    return user


def get_current_user_id():
    return session.get('user_id')


def is_authenticated():
    """Check if user is logged in"""
    return 'user_id' in session


def is_admin():
    """Check if current user has the admin role"""
    return is_authenticated() and session.get('user_role') == 'admin'


def _wants_json():
    return request.is_json or request.path.startswith('/api/')


def _authentication_required():
    if _wants_json():
        return jsonify({
            'success': False,
            'error': 'Authentication required',
            'redirect': '/login'
        }), 401
    return redirect(url_for('auth_bp.login_page', next=request.path))


def _session_user():
    """
    Reload the logged-in user from the database.

    Clears the session when the account was deleted or deactivated and keeps
    the cached role in step with the stored one.
    """
    user = get_current_user()
    if not user:
        if is_authenticated():
            logger.info(f"Dropping session of inactive user {session.get('user_id')}")
            session.clear()
        return None
    session['user_role'] = user['role']
    return user


# Decorators for route protection
def login_required(f):
    """Decorator to require login for a route"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _session_user():
            return _authentication_required()
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require the admin role. Denials go through the permission-error relay."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = _session_user()
        if not user:
            return _authentication_required()

        if user['role'] != 'admin':
            error = report_permission_error()
            if _wants_json():
                return permission_denied_response(error)
            return redirect(url_for('pages.index'))

        return f(*args, **kwargs)
    return decorated_function

"""
Users Repository - Database access layer for customer and staff accounts.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from database.models import User
from services.errors import ConflictError

logger = logging.getLogger(__name__)

EMAIL_TAKEN = 'Este correo ya está registrado'
INVALID_CREDENTIALS = 'Correo o contraseña incorrectos'
ACCOUNT_DISABLED = 'La cuenta está desactivada'
LAST_ADMIN = 'No se puede quitar el último administrador'


def hash_password(password: str) -> str:
    return generate_password_hash(password, method='pbkdf2:sha256')


class UsersRepository:
    """Repository for user database operations."""

    def __init__(self, session: Session):
        self.session = session

    def list_users(self, active_only: bool = False, role: str = None) -> List[Dict]:
        """List users, newest first."""
        query = self.session.query(User)
        if active_only:
            query = query.filter(User.is_active == True)  # noqa: E712
        if role:
            query = query.filter(User.role == role)
        users = query.order_by(User.created_at.desc()).all()
        return [u.to_dict() for u in users]

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Get a user by ID."""
        user = self.session.get(User, user_id)
        return user.to_dict() if user else None

    def get_user_model(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (returns model for auth)."""
        return self.session.query(User).filter(
            func.lower(User.email) == (email or '').strip().lower()
        ).first()

    def create_user(self, email: str, password: str, display_name: str = None,
                    role: str = 'user') -> Dict:
        """
        Create a new account.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.get_user_by_email(email):
            raise ConflictError(EMAIL_TAKEN, 'email')

        user = User(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            display_name=display_name or email.split('@')[0],
            role=role,
            is_active=True
        )
        self.session.add(user)
        self.session.flush()
        logger.info(f"Created user: {user.id} ({role})")
        return user.to_dict()

    def authenticate(self, email: str, password: str) -> Tuple[Optional[User], Optional[str]]:
        """
        Check credentials and stamp last_login.

        Returns:
            Tuple of (user, error_message)
        """
        user = self.get_user_by_email(email)
        if not user or not check_password_hash(user.password_hash, password or ''):
            return None, INVALID_CREDENTIALS
        if not user.is_active:
            return None, ACCOUNT_DISABLED

        user.last_login = datetime.utcnow()
        self.session.flush()
        logger.info(f"User authenticated: {user.email}")
        return user, None

    def count_active_admins(self) -> int:
        return self.session.query(User).filter(
            User.role == 'admin',
            User.is_active == True  # noqa: E712
        ).count()

    def _is_last_admin(self, user: User) -> bool:
        return user.role == 'admin' and user.is_active and self.count_active_admins() <= 1

    def update_user(self, user_id: str, data: Dict) -> Optional[Dict]:
        """
        Update display name, role, active flag or password.

        Raises:
            ConflictError: If the change would leave no active administrator
        """
        user = self.session.get(User, user_id)
        if not user:
            return None

        demoting = 'role' in data and data['role'] != 'admin'
        disabling = 'is_active' in data and not data['is_active']
        if (demoting or disabling) and self._is_last_admin(user):
            raise ConflictError(LAST_ADMIN, 'role')

        for key in ['display_name', 'role', 'is_active']:
            if key in data:
                setattr(user, key, data[key])

        if data.get('password'):
            user.password_hash = hash_password(data['password'])

        user.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated user: {user_id}")
        return user.to_dict()

    def sync_profile(self, user_id: str, display_name: str = None) -> Optional[Dict]:
        """Refresh the profile of the logged-in user: stamps last_login, optionally renames."""
        user = self.session.get(User, user_id)
        if not user:
            return None
        now = datetime.utcnow()
        user.last_login = now
        if display_name:
            user.display_name = display_name
            user.updated_at = now
        self.session.flush()
        return user.to_dict()

    def delete_user(self, user_id: str) -> bool:
        """Soft delete (deactivate) a user."""
        user = self.session.get(User, user_id)
        if not user:
            return False
        if self._is_last_admin(user):
            raise ConflictError(LAST_ADMIN, 'role')
        user.is_active = False
        user.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Deleted (deactivated) user: {user_id}")
        return True

from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role, parse_enum
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: register and authenticate API users. Token issuing stays in the controller."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role=Role.STUDENT,
    ) -> User:
        first_name = require_non_empty(first_name, "firstName")
        last_name = require_non_empty(last_name, "lastName")
        email = require_non_empty(email, "email").lower()
        if "@" not in email:
            raise ValidationError("email is invalid")
        require_min_length(password, "password", 6)
        role = parse_enum(Role, role, "role")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Registered %s account %s", role.value, user_id)
        return self.me(user_id)

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise NotFoundError("User not found")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except Exception:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return user

    def me(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

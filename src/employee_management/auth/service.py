from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.permissions import Caller
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Identity
from .repository import IdentityRepository
from .tokens import TokenCodec

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
PROFILE_MISSING = "Login failed: user profile is not associated with an employee"


@dataclass(frozen=True)
class LoginResult:
    """What the client receives after a successful login."""

    token: str
    identity: Identity
    employee: Employee


class AuthService:
    """Use case: authenticate (login), resolve bearer tokens, manage own credentials."""

    def __init__(self, identities: IdentityRepository, employees: EmployeeRepository, tokens: TokenCodec):
        self._identities = identities
        self._employees = employees
        self._tokens = tokens

    def authenticate(self, email: str, password: str, *, now: Optional[datetime] = None) -> LoginResult:
        email = (email or "").strip().lower()
        identity = self._identities.get_by_email(email) if email else None

        # Unknown email, disabled account and wrong password must be indistinguishable.
        if not identity or not identity.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not _password_matches(identity.password_hash, password):
            raise AuthenticationError(INVALID_CREDENTIALS)

        employee = self._employees.get_by_id(identity.employee_id) if identity.employee_id else None
        if not employee:
            logger.warning("Login refused for identity %s: linked employee missing", identity.identity_id)
            raise AuthenticationError(PROFILE_MISSING)

        now = now or datetime.now(timezone.utc)
        self._identities.touch_last_login(identity.identity_id, when=now.replace(tzinfo=None))
        token = self._tokens.issue(identity_id=identity.identity_id, role=identity.role, now=now)

        logger.info("Identity %s logged in", identity.identity_id)
        return LoginResult(token=token, identity=identity, employee=employee)

    def resolve_token(self, token: str) -> Caller:
        payload = self._tokens.decode(token)
        identity = self._identities.get_by_id(int(payload["sub"]))
        if not identity or not identity.is_active:
            raise AuthenticationError("Invalid or expired token")

        # Role comes from the store, not the token, so demotions apply immediately.
        return Caller(identity_id=identity.identity_id, role=identity.role, employee_id=identity.employee_id)

    def get_profile(self, caller: Caller) -> tuple[Identity, Employee]:
        identity = self._identities.get_by_id(caller.identity_id)
        employee = self._employees.get_by_id(identity.employee_id) if identity and identity.employee_id else None
        if not identity or not employee:
            raise NotFoundError("User profile not found")
        return identity, employee

    def change_password(self, caller: Caller, *, current_password: str, new_password: str) -> None:
        identity = self._identities.get_by_id(caller.identity_id)
        if not identity:
            raise NotFoundError("User profile not found")

        if not _password_matches(identity.password_hash, current_password):
            raise ValidationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        self._identities.update_password(identity.identity_id, password_hash=generate_password_hash(new_password))
        logger.info("Identity %s changed password", identity.identity_id)


def _password_matches(password_hash: str, password: Optional[str]) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except Exception:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


def hash_password(password: str) -> str:
    require_non_empty(password, "Password")
    require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
    return generate_password_hash(password)


def parse_account_role(value: Optional[str]) -> Role:
    if not value:
        return Role.EMPLOYEE
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Account role is not valid")

"""Request guards built from the extractor, the verifier and the role model.

Used as FastAPI dependencies::

    @router.get("/settings")
    def settings(user: AuthenticatedUser = Depends(require_role(RoleLevel.ADMINISTRATOR))):
        ...

Failures are raised as :mod:`aisentinel.services.exceptions` errors and turned
into 401/403 responses by the handlers in :mod:`aisentinel.app`.
"""
import logging
from fastapi import Depends, Request
from aisentinel.model.schemas import AuthSession, AuthenticatedUser
from aisentinel.services.exceptions import (
    NoCredential, InvalidSession, InsufficientRole, DeveloperAccessRequired,
)
from aisentinel.services.roles import effective_role_level, has_access_level, is_developer_email
from aisentinel.services.utils.credentials import extract_session_token
from aisentinel.services.utils.session_management import verify_session

_logger = logging.getLogger(__name__)


def build_identity(session: AuthSession) -> AuthenticatedUser:
    is_developer = is_developer_email(session.email)
    return AuthenticatedUser(
        user_id=session.user_id,
        email=session.email,
        company_id=session.company_id,
        role_level=effective_role_level(session, is_developer),
        actual_role_level=session.role_level,
        is_developer=is_developer,
        test_role=session.test_role if is_developer else None,
        session_token=session.session_token,
    )


def _authenticate(request: Request) -> AuthenticatedUser:
    token = extract_session_token(request)
    if not token:
        raise NoCredential("No session token provided")

    identity = build_identity(verify_session(token))
    request.state.user = identity
    return identity


def require_auth(request: Request) -> AuthenticatedUser:
    """Identity of the caller; 401 when there is none."""
    try:
        return _authenticate(request)
    except NoCredential as e:
        _logger.info(f"Rejected {request.url.path}: no credential")
        raise InvalidSession("Authentication required") from e


def optional_auth(request: Request) -> AuthenticatedUser | None:
    """Identity of the caller, or None for anonymous/invalid credentials."""
    request.state.user = None
    try:
        return _authenticate(request)
    except (NoCredential, InvalidSession):
        return None


def require_role(min_level: int):
    """Dependency factory: authenticated caller whose effective level is at least ``min_level``."""

    def _require_role(user: AuthenticatedUser = Depends(require_auth)) -> AuthenticatedUser:
        if not has_access_level(user, min_level):
            _logger.warning(
                f"User {user.user_id} with role level {user.role_level} denied; requires {int(min_level)}"
            )
            raise InsufficientRole(user.role_level, int(min_level))
        return user

    return _require_role


def require_developer(user: AuthenticatedUser = Depends(require_auth)) -> AuthenticatedUser:
    """Authenticated caller whose real account is a developer account."""
    if not user.is_developer:
        raise DeveloperAccessRequired("Developer access required")
    return user

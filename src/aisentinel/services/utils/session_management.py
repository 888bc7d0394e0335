import logging
import secrets
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from aisentinel.config import SESSION_TTL_DAYS
from aisentinel.model.UserSession import UserSession
from aisentinel.model.schemas import AuthSession
from aisentinel.services import session_store
from aisentinel.services.exceptions import InvalidSession, DeveloperAccessRequired
from aisentinel.services.roles import is_developer_email, parse_test_role
from aisentinel.services.utils.logger_config import mask_email, mask_token

_logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    # Naive UTC, matching the DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_session_token() -> str:
    """64 hex characters from the OS CSPRNG"""
    return secrets.token_hex(32)


def create_user_session(user_id: str, email: str, company_id: int | None, role_level: int,
                        db: Session | None = None) -> AuthSession:
    """
    Mint a new session for a user.

    Args:
        db: when given, the row is only added to this unit of work and the
            caller commits it together with its own writes

    Returns:
        AuthSession: the new session, including its token
    """
    _logger.info(f"Creating user session for {mask_email(email)}")
    now = now_utc()
    new_session = UserSession(
        session_token=generate_session_token(),
        user_id=user_id,
        email=email,
        company_id=company_id,
        role_level=role_level,
        expires_at=now + timedelta(days=SESSION_TTL_DAYS),
        last_accessed_at=now,
        created_at=now,
    )
    if db is not None:
        db.add(new_session)
        db.flush()
        return AuthSession.model_validate(new_session)
    return session_store.put_session(new_session)


def verify_session(token: str) -> AuthSession:
    """
    The single check every authenticated request goes through.

    Raises:
        InvalidSession: the token is unknown or the session has expired
        SessionStoreError: the store could not be queried
    """
    session = session_store.get_session_by_token(token)
    if session is None:
        _logger.info(f"Unknown session token {mask_token(token)}")
        raise InvalidSession("Invalid session")

    now = now_utc()
    if session.expires_at <= now:
        _logger.info(f"Expired session token {mask_token(token)}")
        session_store.delete_session(token)
        raise InvalidSession("Invalid session")

    session_store.touch_session(token, now)
    return session.model_copy(update={"last_accessed_at": now})


def logout(token: str) -> bool:
    _logger.info(f"Logging out session {mask_token(token)}")
    return session_store.delete_session(token)


def logout_everywhere(user_id: str) -> int:
    return session_store.delete_user_sessions(user_id)


def set_developer_test_role(session: AuthSession, test_role: str | None) -> str | None:
    """
    Set or clear the impersonation override on a developer's session.

    Raises:
        DeveloperAccessRequired: the session does not belong to a developer
        ValueError: ``test_role`` names no known role
    """
    if not is_developer_email(session.email):
        _logger.warning(f"Test role change refused for non-developer {mask_email(session.email)}")
        raise DeveloperAccessRequired("Developer access required")

    if test_role is not None and parse_test_role(test_role) is None:
        raise ValueError(f"Unknown test role: {test_role}")

    session_store.set_session_test_role(session.session_token, test_role)
    _logger.info(f"Developer {mask_email(session.email)} test role set to {test_role}")
    return test_role

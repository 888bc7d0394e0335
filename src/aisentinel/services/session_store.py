"""Relational store for ``user_sessions`` rows.

Lookups are exact matches on the unique token column. Nothing is cached in
process; every call goes to the database.
"""
import logging
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from aisentinel.model.UserSession import UserSession
from aisentinel.model.schemas import AuthSession
from aisentinel.services.database import get_db_session
from aisentinel.services.exceptions import SessionStoreError
from aisentinel.services.utils.logger_config import mask_token

_logger = logging.getLogger(__name__)


def put_session(user_session: UserSession) -> AuthSession:
    """Persist a new session row."""
    db = get_db_session()
    try:
        db.add(user_session)
        db.commit()
        db.refresh(user_session)
        return AuthSession.model_validate(user_session)
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error storing session {mask_token(user_session.session_token)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not store session") from e
    finally:
        db.close()


def get_session_by_token(token: str) -> AuthSession | None:
    """Session stored under ``token``, expired or not; None if absent."""
    db = get_db_session()
    try:
        row = db.query(UserSession).filter(UserSession.session_token == token).first()
        return AuthSession.model_validate(row) if row else None
    except SQLAlchemyError as e:
        _logger.error(f"Error loading session {mask_token(token)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not load session") from e
    finally:
        db.close()


def delete_session(token: str) -> bool:
    """Remove a session. Returns False if there was nothing to remove."""
    db = get_db_session()
    try:
        removed = db.query(UserSession).filter(UserSession.session_token == token).delete()
        db.commit()
        return removed > 0
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error deleting session {mask_token(token)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not delete session") from e
    finally:
        db.close()


def touch_session(token: str, accessed_at: datetime) -> bool:
    """Record a successful verification on the session."""
    db = get_db_session()
    try:
        updated = (
            db.query(UserSession)
            .filter(UserSession.session_token == token)
            .update({UserSession.last_accessed_at: accessed_at})
        )
        db.commit()
        return updated > 0
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error touching session {mask_token(token)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not update session") from e
    finally:
        db.close()


def set_session_test_role(token: str, test_role: str | None) -> bool:
    db = get_db_session()
    try:
        updated = (
            db.query(UserSession)
            .filter(UserSession.session_token == token)
            .update({UserSession.test_role: test_role})
        )
        db.commit()
        return updated > 0
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error setting test role on session {mask_token(token)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not update session") from e
    finally:
        db.close()


def delete_user_sessions(user_id: str) -> int:
    """Remove every session belonging to a user ("log out everywhere")."""
    db = get_db_session()
    try:
        removed = db.query(UserSession).filter(UserSession.user_id == user_id).delete()
        db.commit()
        _logger.info(f"Removed {removed} session(s) for user {user_id}")
        return removed
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error deleting sessions for user {user_id}: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not delete sessions") from e
    finally:
        db.close()


def reap_expired_sessions(now: datetime) -> int:
    """Delete sessions whose expiry is at or before ``now``."""
    db = get_db_session()
    try:
        removed = db.query(UserSession).filter(UserSession.expires_at <= now).delete()
        db.commit()
        _logger.info(f"Reaped {removed} expired session(s)")
        return removed
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Error reaping expired sessions: {str(e)}", exc_info=True)
        raise SessionStoreError("Could not reap sessions") from e
    finally:
        db.close()

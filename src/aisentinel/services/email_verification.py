"""Email verification: issue one-time tokens and exchange them for sessions."""
import logging
import secrets
from datetime import timedelta
from sqlalchemy.orm import Session
from aisentinel.config import EMAIL_TOKEN_TTL_HOURS
from aisentinel.model.EmailVerificationToken import EmailVerificationToken
from aisentinel.model.User import User
from aisentinel.model.schemas import AuthSession
from aisentinel.services.database import (transaction, get_company_by_email_domain,
                                          get_company_employee_by_email)
from aisentinel.services.email_services import send_verification_email
from aisentinel.services.exceptions import TokenNotFound, TokenAlreadyUsed, TokenExpired
from aisentinel.services.roles import RoleLevel, level_for_role, role_label
from aisentinel.services.utils.logger_config import mask_email, mask_token
from aisentinel.services.utils.session_management import create_user_session, now_utc

_logger = logging.getLogger(__name__)


def generate_verification_token() -> str:
    return secrets.token_urlsafe(32)


def initiate_email_verification(email: str) -> bool:
    """Store a fresh one-time token for ``email`` and send the link.

    Returns whether the email was handed to the mail server.
    """
    token = generate_verification_token()
    with transaction() as db:
        db.add(EmailVerificationToken(
            email=email.strip().lower(),
            token=token,
            expires_at=now_utc() + timedelta(hours=EMAIL_TOKEN_TTL_HOURS),
            is_used=False,
        ))
    _logger.info(f"Verification token issued for {mask_email(email)}")
    return send_verification_email(email, token)


def _match_tenant(db: Session, email: str) -> tuple[int | None, int]:
    """Company and role for an email based on its domain and employee records."""
    company = get_company_by_email_domain(db, email)
    if company is None:
        return None, int(RoleLevel.USER)

    employee = get_company_employee_by_email(db, email, company.id)
    role_level = level_for_role(employee.role) if employee else int(RoleLevel.USER)
    _logger.info(f"Matched {mask_email(email)} to company {company.id} with role level {role_level}")
    return company.id, role_level


def resolve_user(db: Session, email: str) -> User:
    """Existing user for the email, or a new one placed in its tenant."""
    now = now_utc()
    user = db.query(User).filter(User.email == email).first()

    if user is None:
        company_id, role_level = _match_tenant(db, email)
        user = User(
            id=secrets.token_urlsafe(9),
            email=email,
            company_id=company_id,
            role_level=role_level,
            role=role_label(role_level),
            is_trial_user=company_id is None,
            last_login_at=now,
        )
        db.add(user)
        db.flush()
        _logger.info(f"Created user {user.id} for {mask_email(email)}")
        return user

    if user.company_id is None:
        company_id, role_level = _match_tenant(db, email)
        if company_id is not None:
            user.company_id = company_id
            user.role_level = role_level
            user.role = role_label(role_level)
            user.is_trial_user = False

    user.last_login_at = now
    db.flush()
    return user


def verify_email_token(token: str) -> AuthSession:
    """
    Exchange a one-time email token for a new session.

    Consuming the token, creating/updating the user and creating the session
    commit together or not at all.

    Raises:
        TokenNotFound, TokenAlreadyUsed, TokenExpired: the token can't be used
        SessionStoreError: the store failed; nothing was written
    """
    with transaction() as db:
        record = db.query(EmailVerificationToken).filter(EmailVerificationToken.token == token).first()
        if record is None:
            raise TokenNotFound()
        if record.is_used:
            raise TokenAlreadyUsed()
        if record.expires_at <= now_utc():
            raise TokenExpired()

        # Conditional flip so two concurrent requests cannot both consume the token
        claimed = (
            db.query(EmailVerificationToken)
            .filter(EmailVerificationToken.id == record.id)
            .filter(EmailVerificationToken.is_used.is_(False))
            .update({EmailVerificationToken.is_used: True}, synchronize_session=False)
        )
        if claimed != 1:
            raise TokenAlreadyUsed()

        user = resolve_user(db, record.email)
        session = create_user_session(
            user_id=user.id,
            email=user.email,
            company_id=user.company_id,
            role_level=user.role_level,
            db=db,
        )

    _logger.info(f"Email token {mask_token(token)} exchanged for a session for user {session.user_id}")
    return session

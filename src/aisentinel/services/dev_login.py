"""Development/test login: sessions for configured test accounts without email."""
import logging
import secrets
from aisentinel.config import DEV_LOGIN_ACCOUNTS, DEMO_COMPANY_ID
from aisentinel.model.Company import Company
from aisentinel.model.User import User
from aisentinel.model.schemas import AuthSession
from aisentinel.services.database import transaction
from aisentinel.services.exceptions import DeveloperAccessRequired
from aisentinel.services.roles import level_for_role, parse_test_role, role_label
from aisentinel.services.utils.logger_config import mask_email
from aisentinel.services.utils.session_management import create_user_session, now_utc

_logger = logging.getLogger(__name__)


def dev_account_level(email: str) -> int | None:
    """Role level configured for a test account, None if the email isn't one."""
    label = DEV_LOGIN_ACCOUNTS.get(email.strip().lower())
    if label is None:
        return None
    level = parse_test_role(label)
    return level if level is not None else level_for_role(label)


def dev_login(email: str) -> AuthSession:
    """
    Log in as a configured test account.

    The user row is created or brought in line with the configured role, then
    a regular session is minted; the verifier treats it like any other.

    Raises:
        DeveloperAccessRequired: the email is not a configured test account
    """
    email = email.strip().lower()
    role_level = dev_account_level(email)
    if role_level is None:
        _logger.warning(f"Development login refused for {mask_email(email)}")
        raise DeveloperAccessRequired("Development login only available for test accounts")

    _logger.info(f"Development login for {mask_email(email)} at role level {role_level}")
    with transaction() as db:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            demo_company = db.get(Company, DEMO_COMPANY_ID)
            user = User(id=secrets.token_urlsafe(9), email=email,
                        company_id=demo_company.id if demo_company else None)
            db.add(user)
        user.role_level = role_level
        user.role = role_label(role_level)
        user.is_trial_user = False
        user.last_login_at = now_utc()
        db.flush()
        session = create_user_session(
            user_id=user.id,
            email=user.email,
            company_id=user.company_id,
            role_level=user.role_level,
            db=db,
        )
    return session

import logging
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from aisentinel.config import DATABASE_URL
from aisentinel.model.base import Base
from aisentinel.model.Company import Company
from aisentinel.model.CompanyEmployee import CompanyEmployee
from aisentinel.model.User import User
from aisentinel.model.UserSession import UserSession  # noqa: F401
from aisentinel.model.EmailVerificationToken import EmailVerificationToken  # noqa: F401
from aisentinel.services.exceptions import SessionStoreError
from aisentinel.services.utils.logger_config import mask_email

_logger = logging.getLogger(__name__)


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create any missing tables"""
    _logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=engine)


def get_db_session() -> Session:
    """Get a database session"""
    # Closed by the caller
    return SessionLocal()


@contextmanager
def transaction() -> Iterator[Session]:
    """
    Unit of work: commit on success, roll back on any error.

    Database errors are re-raised as :class:`SessionStoreError` so callers can
    tell a broken store apart from a failed authentication.
    """
    db = get_db_session()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        _logger.error(f"Database error, transaction rolled back: {str(e)}", exc_info=True)
        raise SessionStoreError("Database operation failed") from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_user_by_email(email: str) -> User | None:
    """
    Retrieve user from the database by email.

    Args:
        email (str): The user's email address

    Returns:
        User | None: User object if found, None otherwise
    """
    db = get_db_session()
    try:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()
    except SQLAlchemyError as e:
        _logger.error(f"Error retrieving user by email {mask_email(email)}: {str(e)}", exc_info=True)
        raise SessionStoreError("Database operation failed") from e
    finally:
        db.close()


def get_user_by_id(user_id: str) -> User | None:
    db = get_db_session()
    try:
        return db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        _logger.error(f"Error retrieving user {user_id}: {str(e)}", exc_info=True)
        raise SessionStoreError("Database operation failed") from e
    finally:
        db.close()


def get_company_by_id(company_id: int) -> Company | None:
    db = get_db_session()
    try:
        return db.query(Company).filter(Company.id == company_id).first()
    except SQLAlchemyError as e:
        _logger.error(f"Error retrieving company {company_id}: {str(e)}", exc_info=True)
        raise SessionStoreError("Database operation failed") from e
    finally:
        db.close()


def email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1].strip().lower()


def get_company_by_email_domain(db: Session, email: str) -> Company | None:
    """Active tenant whose domain matches the email's domain, if any."""
    return (
        db.query(Company)
        .filter(func.lower(Company.domain) == email_domain(email))
        .filter(Company.is_active.is_(True))
        .first()
    )


def get_company_employee_by_email(db: Session, email: str, company_id: int) -> CompanyEmployee | None:
    """Active pre-provisioned employee record for the email in the given company."""
    return (
        db.query(CompanyEmployee)
        .filter(func.lower(CompanyEmployee.email) == email.lower())
        .filter(CompanyEmployee.company_id == company_id)
        .filter(CompanyEmployee.is_active.is_(True))
        .first()
    )

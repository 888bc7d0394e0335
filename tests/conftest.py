"""
Pytest configuration and shared fixtures for aisentinel tests.
"""
import pytest
import sys
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Set required environment variables before importing app modules
os.environ['DATABASE_URL'] = 'sqlite:///./test_aisentinel.db'
os.environ['ENVIRONMENT'] = 'test'
os.environ['DEVELOPER_EMAILS'] = 'dev@aisentinel.dev'
os.environ['DEV_LOGIN_ENABLED'] = '1'
os.environ['DEV_LOGIN_ACCOUNTS'] = 'owner@aisentinel.dev:owner,user@aisentinel.dev:user'
os.environ['DEMO_COMPANY_ID'] = '1'
os.environ.pop('SMTP_HOST', None)

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from aisentinel.model.base import Base  # noqa: E402
from aisentinel.model.Company import Company  # noqa: E402
from aisentinel.model.CompanyEmployee import CompanyEmployee  # noqa: E402
from aisentinel.model.User import User  # noqa: E402
from aisentinel.model.UserSession import UserSession  # noqa: E402
from aisentinel.services.database import engine, SessionLocal  # noqa: E402


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture(autouse=True)
def database():
    """Fresh tables for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def pytest_sessionfinish(session, exitstatus):
    test_db = Path('test_aisentinel.db')
    if test_db.exists():
        test_db.unlink()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_company(db):
    def _make(name='Acme', domain='acme.com', company_id=None, is_active=True):
        company = Company(id=company_id, name=name, domain=domain, is_active=is_active)
        db.add(company)
        db.flush()
        new_id = company.id
        db.commit()
        return new_id
    return _make


@pytest.fixture
def make_employee(db):
    def _make(company_id, email, role='employee', is_active=True):
        db.add(CompanyEmployee(company_id=company_id, email=email, role=role, is_active=is_active))
        db.commit()
    return _make


@pytest.fixture
def make_user(db):
    def _make(email='test@example.com', role_level=1, company_id=None, user_id=None, first_name=None):
        user = User(
            id=user_id or f"user-{email}",
            email=email,
            role_level=role_level,
            role='user',
            company_id=company_id,
            first_name=first_name,
        )
        db.add(user)
        db.flush()
        new_id = user.id
        db.commit()
        return new_id
    return _make


@pytest.fixture
def make_session(db, make_user):
    """Insert a session row directly; returns its token"""
    counter = {'n': 0}

    def _make(email='test@example.com', role_level=1, company_id=None, expires_at=None,
              test_role=None, token=None, create_user=True):
        counter['n'] += 1
        user_id = f"user-{email}"
        if create_user and db.query(User).filter(User.id == user_id).first() is None:
            make_user(email=email, role_level=role_level, company_id=company_id)
        token = token or f"{counter['n']:064d}"
        db.add(UserSession(
            session_token=token,
            user_id=user_id,
            email=email,
            company_id=company_id,
            role_level=role_level,
            test_role=test_role,
            expires_at=expires_at or utcnow() + timedelta(days=30),
            last_accessed_at=None,
        ))
        db.commit()
        return token
    return _make


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from aisentinel.app import app
    return TestClient(app)

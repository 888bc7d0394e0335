"""Tests for session management"""
import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from aisentinel.services import session_store
from aisentinel.services.exceptions import InvalidSession, DeveloperAccessRequired, SessionStoreError
from aisentinel.services.utils.session_management import (
    create_user_session, generate_session_token, logout, logout_everywhere, set_developer_test_role,
    verify_session,
)

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0)


class TestSessionManagement:
    """Test session management functions"""

    def test_generate_session_token(self):
        """Tokens are 64 hex characters and not repeated"""
        tokens = {generate_session_token() for _ in range(50)}
        assert len(tokens) == 50
        for token in tokens:
            assert len(token) == 64
            int(token, 16)

    def test_create_user_session(self, make_user):
        """Test creating a new user session"""
        user_id = make_user(email='test@example.com', role_level=2, company_id=None)

        session = create_user_session(user_id, 'test@example.com', None, 2)

        assert len(session.session_token) == 64
        assert session.user_id == user_id
        assert session.role_level == 2
        assert session.company_id is None
        stored = session_store.get_session_by_token(session.session_token)
        assert stored is not None
        assert stored.email == 'test@example.com'
        assert stored.expires_at - stored.last_accessed_at == timedelta(days=30)

    def test_create_user_session_store_failure(self, make_user):
        """Store failures surface as SessionStoreError"""
        user_id = make_user()
        with patch('aisentinel.services.session_store.get_db_session') as mock_db:
            mock_db.return_value.commit.side_effect = OperationalError('x', {}, Exception('down'))
            with pytest.raises(SessionStoreError):
                create_user_session(user_id, 'test@example.com', None, 1)
            mock_db.return_value.rollback.assert_called_once()

    def test_verify_session_valid_token(self, make_session):
        """Valid session is returned and its last access recorded"""
        token = make_session(email='test@example.com', role_level=99, company_id=None,
                             expires_at=FIXED_NOW + timedelta(days=1))

        with patch('aisentinel.services.utils.session_management.now_utc', return_value=FIXED_NOW):
            session = verify_session(token)

        assert session.email == 'test@example.com'
        assert session.role_level == 99
        assert session.last_accessed_at == FIXED_NOW
        assert session_store.get_session_by_token(token).last_accessed_at == FIXED_NOW

    def test_verify_session_invalid_token(self):
        """Unknown token is rejected"""
        with pytest.raises(InvalidSession):
            verify_session('f' * 64)

    def test_verify_session_expired_token(self, make_session):
        """Expired session raises the same error as an unknown one and is removed"""
        token = make_session(expires_at=FIXED_NOW - timedelta(hours=1))

        with patch('aisentinel.services.utils.session_management.now_utc', return_value=FIXED_NOW):
            with pytest.raises(InvalidSession) as expired:
                verify_session(token)
        with pytest.raises(InvalidSession) as unknown:
            verify_session('e' * 64)

        assert type(expired.value) is type(unknown.value)
        assert str(expired.value) == str(unknown.value)
        assert session_store.get_session_by_token(token) is None

    def test_verify_session_expiry_boundary(self, make_session):
        """A session expiring exactly now is already expired"""
        token = make_session(expires_at=FIXED_NOW)

        with patch('aisentinel.services.utils.session_management.now_utc', return_value=FIXED_NOW):
            with pytest.raises(InvalidSession):
                verify_session(token)

    def test_verify_session_one_second_before_expiry(self, make_session):
        token = make_session(expires_at=FIXED_NOW + timedelta(seconds=1))

        with patch('aisentinel.services.utils.session_management.now_utc', return_value=FIXED_NOW):
            assert verify_session(token).session_token == token

    def test_verify_session_store_unavailable(self):
        """A broken store is not reported as an invalid session"""
        with patch('aisentinel.services.session_store.get_db_session') as mock_db:
            mock_db.return_value.query.side_effect = OperationalError('x', {}, Exception('down'))
            with pytest.raises(SessionStoreError):
                verify_session('a' * 64)

    def test_logout(self, make_session):
        token = make_session()
        assert logout(token) is True
        with pytest.raises(InvalidSession):
            verify_session(token)
        assert logout(token) is False

    def test_logout_everywhere(self, make_session):
        """Every session of the user goes, other users keep theirs"""
        first = make_session(email='a@example.com')
        second = make_session(email='a@example.com')
        other = make_session(email='b@example.com')

        assert logout_everywhere('user-a@example.com') == 2

        for token in (first, second):
            with pytest.raises(InvalidSession):
                verify_session(token)
        assert verify_session(other).email == 'b@example.com'


class TestDeveloperTestRole:
    """Test the developer impersonation override"""

    def test_developer_can_set_test_role(self, make_session):
        token = make_session(email='dev@aisentinel.dev', role_level=1000)
        session = verify_session(token)

        assert set_developer_test_role(session, 'owner') == 'owner'
        assert session_store.get_session_by_token(token).test_role == 'owner'

    def test_developer_can_clear_test_role(self, make_session):
        token = make_session(email='dev@aisentinel.dev', role_level=1000, test_role='user')
        session = verify_session(token)

        set_developer_test_role(session, None)

        assert session_store.get_session_by_token(token).test_role is None

    def test_non_developer_cannot_set_test_role(self, make_session):
        token = make_session(email='owner@acme.com', role_level=99)
        session = verify_session(token)

        with pytest.raises(DeveloperAccessRequired):
            set_developer_test_role(session, 'super-user')
        assert session_store.get_session_by_token(token).test_role is None

    def test_unknown_test_role_rejected(self, make_session):
        token = make_session(email='dev@aisentinel.dev', role_level=1000)
        session = verify_session(token)

        with pytest.raises(ValueError):
            set_developer_test_role(session, 'janitor')

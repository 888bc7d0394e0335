"""Tests for session credential extraction"""
from starlette.requests import Request
from aisentinel.services.utils.credentials import extract_session_token


def _request(headers=None, cookies=None):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


class TestExtractSessionToken:
    """Test the fixed priority order"""

    def test_bearer_header(self):
        assert extract_session_token(_request(headers={"Authorization": "Bearer A"})) == "A"

    def test_bearer_scheme_case_insensitive(self):
        assert extract_session_token(_request(headers={"Authorization": "bearer A"})) == "A"

    def test_custom_header(self):
        assert extract_session_token(_request(headers={"X-Session-Token": "B"})) == "B"

    def test_cookie(self):
        assert extract_session_token(_request(cookies={"sessionToken": "C"})) == "C"

    def test_bearer_beats_cookie(self):
        request = _request(headers={"Authorization": "Bearer A"}, cookies={"sessionToken": "B"})
        assert extract_session_token(request) == "A"

    def test_bearer_beats_custom_header(self):
        request = _request(headers={"Authorization": "Bearer A", "X-Session-Token": "B"})
        assert extract_session_token(request) == "A"

    def test_custom_header_beats_cookie(self):
        request = _request(headers={"X-Session-Token": "B"}, cookies={"sessionToken": "C"})
        assert extract_session_token(request) == "B"

    def test_non_bearer_authorization_falls_through(self):
        request = _request(headers={"Authorization": "Basic dXNlcjpwYXNz"}, cookies={"sessionToken": "C"})
        assert extract_session_token(request) == "C"

    def test_empty_bearer_falls_through(self):
        request = _request(headers={"Authorization": "Bearer   ", "X-Session-Token": "B"})
        assert extract_session_token(request) == "B"

    def test_no_credential(self):
        assert extract_session_token(_request()) is None

    def test_other_cookies_ignored(self):
        assert extract_session_token(_request(cookies={"session_token": "X"})) is None

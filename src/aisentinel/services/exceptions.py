"""Authentication and authorization errors.

Auth failures are converted to HTTP responses by the handlers registered in
:mod:`aisentinel.app`; store failures are kept apart so they surface as 500s.
"""


class AuthError(Exception):
    """Base class for authentication/authorization failures."""


class NoCredential(AuthError):
    """The request carried no session token."""


class InvalidSession(AuthError):
    """The token is unknown or its session has expired.

    Deliberately one error for both cases.
    """


class InsufficientRole(AuthError):
    """Valid session whose role level is below the endpoint's requirement."""

    def __init__(self, current_level: int, required_level: int):
        self.current_level = current_level
        self.required_level = required_level
        super().__init__(f"Role level {current_level} is below required level {required_level}")


class DeveloperAccessRequired(AuthError):
    """Developer-only operation attempted by a regular account."""


class EmailTokenError(AuthError):
    """Base for one-time email verification token failures."""

    reason = "invalid_token"
    message = "Invalid verification token"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class TokenNotFound(EmailTokenError):
    reason = "token_not_found"
    message = "Verification link is invalid. Please request a new one."


class TokenAlreadyUsed(EmailTokenError):
    reason = "token_already_used"
    message = "Verification link has already been used. Please request a new one."


class TokenExpired(EmailTokenError):
    reason = "token_expired"
    message = "Verification link has expired. Please request a new one."


class SessionStoreError(Exception):
    """The backing store could not be reached or the query failed."""

"""Authentication, session and developer routes"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from aisentinel.config import (APP_BASE_URL, COOKIE_SECURE, DEV_LOGIN_ENABLED,
                               SESSION_COOKIE_MAX_AGE, SESSION_COOKIE_NAME)
from aisentinel.model.schemas import (AuthenticatedUser, CapabilitiesResponse, DevLoginRequest,
                                      DeveloperRoleRequest, DeveloperStatusResponse, MeUser,
                                      StatusResponse, VerificationRequest)
from aisentinel.services.auth_middleware import (build_identity, optional_auth, require_auth,
                                                 require_developer)
from aisentinel.services.database import get_company_by_id, get_user_by_id
from aisentinel.services.dev_login import dev_login
from aisentinel.services.email_verification import initiate_email_verification, verify_email_token
from aisentinel.services.roles import capabilities_for, role_label
from aisentinel.services.session_store import get_session_by_token
from aisentinel.services.utils.logger_config import mask_email
from aisentinel.services.utils.session_management import (logout as end_session, logout_everywhere,
                                                          set_developer_test_role)

_logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["authentication"])


def set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


@router.post("/request-verification")
def request_verification(payload: VerificationRequest):
    """Email a one-time sign-in link"""
    _logger.info(f"Verification requested for {mask_email(payload.email)}")
    sent = initiate_email_verification(payload.email)
    if not sent:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to send verification email"},
        )
    return {"success": True, "message": "Verification email sent successfully"}


@router.get("/verify")
def verify(token: str | None = None):
    """Exchange an email token for a session cookie and send the browser on"""
    if not token:
        raise HTTPException(status_code=400, detail="No verification token provided")

    session = verify_email_token(token)
    response = RedirectResponse(url=f"{APP_BASE_URL}/verify?success=true", status_code=302)
    set_session_cookie(response, session.session_token)
    return response


@router.get("/me")
def me(user: AuthenticatedUser | None = Depends(optional_auth)):
    """Current identity, or {"authenticated": false} for anonymous callers"""
    if user is None:
        return {"authenticated": False}

    db_user = get_user_by_id(user.user_id)
    company = get_company_by_id(user.company_id) if user.company_id is not None else None
    me_user = MeUser(
        id=user.user_id,
        email=user.email,
        first_name=db_user.first_name if db_user else None,
        last_name=db_user.last_name if db_user else None,
        company_id=user.company_id,
        company_name=company.name if company else None,
        role=role_label(user.role_level),
        role_level=user.role_level,
    )
    return {"authenticated": True, "user": me_user.model_dump(by_alias=True)}


@router.get("/status", response_model=StatusResponse)
def status(user: AuthenticatedUser | None = Depends(optional_auth)):
    return StatusResponse(authenticated=user is not None, requires_auth=user is None)


@router.post("/logout")
def logout(user: AuthenticatedUser = Depends(require_auth)):
    """Logout and clear session"""
    end_session(user.session_token)
    response = JSONResponse(content={"success": True, "message": "Logged out successfully"})
    clear_session_cookie(response)
    return response


@router.post("/logout-all")
def logout_all(user: AuthenticatedUser = Depends(require_auth)):
    """End every session of the current user"""
    removed = logout_everywhere(user.user_id)
    response = JSONResponse(content={"success": True, "sessionsRemoved": removed})
    clear_session_cookie(response)
    return response


@router.post("/dev-login")
def development_login(payload: DevLoginRequest):
    """Session for a configured test account; absent unless enabled outside production"""
    if not DEV_LOGIN_ENABLED:
        raise HTTPException(status_code=404, detail="Not found")

    session = dev_login(payload.email)
    response = JSONResponse(content={
        "success": True,
        "sessionToken": session.session_token,
        "roleLevel": session.role_level,
        "role": role_label(session.role_level),
    })
    set_session_cookie(response, session.session_token)
    return response


@router.get("/developer-status", response_model=DeveloperStatusResponse)
def developer_status(user: AuthenticatedUser = Depends(require_auth)):
    return DeveloperStatusResponse(
        is_developer=user.is_developer,
        test_role=user.test_role,
        actual_role=user.actual_role_level,
        effective_role=user.role_level,
    )


@router.post("/developer/test-role", response_model=DeveloperStatusResponse)
def developer_test_role(payload: DeveloperRoleRequest,
                              user: AuthenticatedUser = Depends(require_developer)):
    """Simulate a lower role on the developer's own session; null clears it"""
    session = get_session_by_token(user.session_token)
    if session is None:
        raise HTTPException(status_code=401, detail="Session ended")
    try:
        test_role = set_developer_test_role(session, payload.test_role)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    updated = build_identity(session.model_copy(update={"test_role": test_role}))
    return DeveloperStatusResponse(
        is_developer=updated.is_developer,
        test_role=updated.test_role,
        actual_role=updated.actual_role_level,
        effective_role=updated.role_level,
    )


@router.get("/capabilities", response_model=CapabilitiesResponse)
def capabilities(user: AuthenticatedUser = Depends(require_auth)):
    """Capability classes unlocked by the caller's effective role"""
    return CapabilitiesResponse(
        role=role_label(user.role_level),
        role_level=user.role_level,
        capabilities=capabilities_for(user.role_level),
    )

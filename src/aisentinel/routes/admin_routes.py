"""Role-gated administration endpoints"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from aisentinel.model.schemas import AuthenticatedUser
from aisentinel.services.auth_middleware import require_role
from aisentinel.services.roles import RoleLevel, has_access_level, role_label
from aisentinel.services.session_store import reap_expired_sessions
from aisentinel.services.utils.session_management import now_utc

_logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/sessions/reap")
def reap_sessions(user: AuthenticatedUser = Depends(require_role(RoleLevel.SUPER_USER))):
    """Delete expired sessions to bound the table's size"""
    removed = reap_expired_sessions(now_utc())
    _logger.info(f"User {user.user_id} reaped {removed} expired session(s)")
    return {"removed": removed}


@router.get("/access-check/{role}")
def access_check(role: str, user: AuthenticatedUser = Depends(require_role(RoleLevel.ADMIN))):
    """Whether the caller's effective role meets the named role's level"""
    try:
        required = RoleLevel[role.upper().replace("-", "_")]
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown role: {role}")
    return {
        "role": role_label(required),
        "requiredRole": int(required),
        "currentRole": user.role_level,
        "allowed": has_access_level(user, required),
    }

"""Request/response models and the in-process identity types"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either form on input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthSession(BaseModel):
    """Detached snapshot of a stored session row"""
    model_config = ConfigDict(from_attributes=True)

    session_token: str
    user_id: str
    email: str
    company_id: Optional[int] = None
    role_level: int
    test_role: Optional[str] = None
    expires_at: datetime
    last_accessed_at: Optional[datetime] = None


class AuthenticatedUser(BaseModel):
    """Identity attached to a request once its session has been verified.

    ``role_level`` is the effective level used for authorization (it honours
    a developer's test role); ``actual_role_level`` is the stored one.
    """
    user_id: str
    email: str
    company_id: Optional[int] = None
    role_level: int
    actual_role_level: int
    is_developer: bool = False
    test_role: Optional[str] = None
    session_token: str


class VerificationRequest(BaseModel):
    email: EmailStr


class DevLoginRequest(BaseModel):
    email: EmailStr


class DeveloperRoleRequest(CamelModel):
    test_role: Optional[str] = None


class MeUser(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_id: Optional[int] = None
    company_name: Optional[str] = None
    role: str
    role_level: int


class StatusResponse(CamelModel):
    authenticated: bool
    requires_auth: bool


class DeveloperStatusResponse(CamelModel):
    is_developer: bool
    test_role: Optional[str] = None
    actual_role: int
    effective_role: int


class CapabilitiesResponse(CamelModel):
    role: str
    role_level: int
    capabilities: list[str]


class CompanyResponse(CamelModel):
    id: int
    name: str
    domain: Optional[str] = None
    is_demo: bool = False

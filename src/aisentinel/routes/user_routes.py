"""Tenant context for the current caller"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from aisentinel.config import DEMO_COMPANY_ID
from aisentinel.model.schemas import AuthenticatedUser, CompanyResponse
from aisentinel.services.auth_middleware import optional_auth
from aisentinel.services.database import get_company_by_id

_logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/current-company", response_model=CompanyResponse)
def current_company(user: AuthenticatedUser | None = Depends(optional_auth)):
    """Caller's company; anonymous callers and users without one get the demo tenant"""
    company_id = user.company_id if user and user.company_id is not None else DEMO_COMPANY_ID
    company = get_company_by_id(company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return CompanyResponse(
        id=company.id,
        name=company.name,
        domain=company.domain,
        is_demo=company.id == DEMO_COMPANY_ID,
    )

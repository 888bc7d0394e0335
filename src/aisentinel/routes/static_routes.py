"""Health check routes"""
from fastapi import APIRouter
from sqlalchemy import text
from aisentinel.services.database import engine

router = APIRouter(tags=["static"])


@router.get("/health")
async def health():
    """Root endpoint to verify the app is running"""
    return {
        "message": "AI Sentinel auth API is running",
        "endpoints": ["/api/auth/me", "/api/auth/verify", "/api/auth/logout"]
    }


@router.get("/db-ping")
def db_ping() -> dict:
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "select_1": result}

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from aisentinel.config import LOG_LEVEL, SESSION_COOKIE_NAME
from aisentinel.routes import admin_routes, auth_routes, static_routes, user_routes
from aisentinel.services.database import init_db
from aisentinel.services.exceptions import (
    DeveloperAccessRequired, EmailTokenError, InsufficientRole, InvalidSession, NoCredential,
    SessionStoreError,
)
from aisentinel.services.roles import role_label
from aisentinel.services.utils.logger_config import setup_logging

setup_logging(getattr(logging, LOG_LEVEL, logging.INFO))
_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="AI Sentinel Auth", lifespan=lifespan)

app.include_router(static_routes.router)
app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(admin_routes.router)


@app.exception_handler(NoCredential)
@app.exception_handler(InvalidSession)
async def unauthenticated_handler(request: Request, exc: Exception):
    response = JSONResponse(
        status_code=401,
        content={"message": "Authentication required", "requiresAuth": True},
    )
    # A stale cookie would otherwise be replayed on every request
    if request.cookies.get(SESSION_COOKIE_NAME):
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


@app.exception_handler(InsufficientRole)
async def insufficient_role_handler(request: Request, exc: InsufficientRole):
    return JSONResponse(
        status_code=403,
        content={
            "error": f"Requires {role_label(exc.required_level)} access",
            "currentRole": exc.current_level,
            "requiredRole": exc.required_level,
        },
    )


@app.exception_handler(DeveloperAccessRequired)
async def developer_required_handler(request: Request, exc: DeveloperAccessRequired):
    return JSONResponse(status_code=403, content={"error": str(exc)})


@app.exception_handler(EmailTokenError)
async def email_token_handler(request: Request, exc: EmailTokenError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": exc.message, "reason": exc.reason},
    )


@app.exception_handler(SessionStoreError)
async def store_error_handler(request: Request, exc: SessionStoreError):
    _logger.error(f"Session store failure on {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"message": "Authentication service unavailable"})


def main():
    """Start the FastAPI application using uvicorn"""
    import uvicorn
    _logger.info("Starting AI Sentinel auth service...")

    uvicorn.run(
        "aisentinel.app:app",
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )


def run():
    """Calls :func:`main` passing the CLI arguments extracted from :obj:`sys.argv`

    This function can be used as entry point to create console scripts with setuptools.
    """
    main()


if __name__ == "__main__":
    #     python -m aisentinel.app
    run()

"""
FastAPI application emulating the Ekraf admin backend in memory.

Errors use the backend's ``{"message": ...}`` body; validation failures are
400 with a field-level ``errors`` list.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ekraf_admin.sandbox.routers.articles import router as articles_router
from ekraf_admin.sandbox.routers.auth import router as auth_router
from ekraf_admin.sandbox.routers.catalog import (
    categories_router, master_data_router, subsectors_router,
)
from ekraf_admin.sandbox.routers.products import router as products_router
from ekraf_admin.sandbox.routers.users import router as users_router
from ekraf_admin.sandbox.state import SandboxState, seed_demo_data

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            # Drop the leading "body"/"query" segment
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.debug("Validation failed on %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


def create_app(state: Optional[SandboxState] = None, seed: bool = False) -> FastAPI:
    """
    Build the sandbox application.

    Args:
        state: Data to serve; a fresh empty state is created when omitted
        seed: Fill the state with the demo data set

    Returns:
        The FastAPI application, with its state at ``app.state.sandbox``
    """
    if state is None:
        state = SandboxState()
    if seed:
        seed_demo_data(state)

    app = FastAPI(title="Ekraf Admin Sandbox API")
    app.state.sandbox = state
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(auth_router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
    app.include_router(products_router, prefix=f"{API_PREFIX}/products", tags=["products"])
    app.include_router(users_router, prefix=f"{API_PREFIX}/users", tags=["users"])
    app.include_router(categories_router, prefix=f"{API_PREFIX}/business-categories", tags=["business-categories"])
    app.include_router(subsectors_router, prefix=f"{API_PREFIX}/subsectors", tags=["subsectors"])
    app.include_router(master_data_router, prefix=f"{API_PREFIX}/master-data", tags=["master-data"])
    app.include_router(articles_router, prefix=f"{API_PREFIX}/articles", tags=["articles"])

    @app.get("/")
    def read_root():
        """Root endpoint, reports that the sandbox is running."""
        return {"message": "Ekraf Admin Sandbox API"}

    return app

"""
Interview Console - Mock Interview Platform Front-End

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from interview_console.config.settings import get_settings
from interview_console.api.router import api_router
from interview_console.api.dependencies import (
    cleanup,
    get_admin_console,
    get_dashboard,
    get_interview,
    get_login_page,
    get_mentor,
    get_shell,
    get_toasts,
    startup,
)
from interview_console.core.errors import APIError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Interview Console...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode against {settings.api_base_url}")
    await startup()

    yield

    # Shutdown
    logger.info("Shutting down Interview Console...")
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title="Interview Console",
    description="Student, mentor and admin front-end for the mock interview platform",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Remote API failures nobody handled surface with their detail."""
    logger.error(f"Unhandled API error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code or 502,
        content={"detail": exc.message("The interview service is unavailable.")},
    )


# Mount API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


# ============================================================================
# PAGE ROUTES
# ============================================================================

async def _page_state(page: str, request: Request) -> dict:
    if page == "login":
        login_page = get_login_page()
        login_page.handle_query(request.query_params)
        return login_page.as_dict()
    if page == "register":
        return get_mentor().as_dict()
    if page == "admin":
        return get_admin_console().as_dict()
    if page == "dashboard":
        dashboard = get_dashboard()
        await dashboard.refresh_if_needed()
        return dashboard.as_dict()
    if page == "interview":
        return get_interview().as_dict()
    return {}


@app.get("/{path:path}", include_in_schema=False)
async def page(path: str, request: Request):
    """Resolve a page path, redirecting where the shell says so."""
    route = get_shell().resolve(path)
    if route.is_redirect:
        return RedirectResponse(route.redirect, status_code=307)
    return {
        "page": route.page,
        "state": await _page_state(route.page, request),
        "toasts": get_toasts().as_list(),
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

"""
Graph Tutorial - FastAPI Application

Usage:
    uvicorn graph_tutorial.web.main:app --host 127.0.0.1 --port 5000 --reload

    Or run directly:
    python -m graph_tutorial.web.main
"""

from contextlib import asynccontextmanager

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse, RedirectResponse  # noqa: E402

from graph_tutorial import __version__, get_connection  # noqa: E402
from graph_tutorial.config import load_config  # noqa: E402
from graph_tutorial.logging_config import (  # noqa: E402
    bind_request_context,
    get_logger,
    setup_logging,
)
from graph_tutorial.web.dependencies import SignInRequired  # noqa: E402
from graph_tutorial.web.models import ErrorResponse  # noqa: E402
from graph_tutorial.web.routes import web_router  # noqa: E402


setup_logging()
logger = get_logger(__name__)

config = load_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("app_starting", version=__version__)

    # Create tables
    conn = get_connection()
    conn.close()
    logger.info("account_store_ready")

    yield

    logger.info("app_stopping")


app = FastAPI(
    title="Graph Tutorial",
    description="Mail and calendar over Microsoft Graph",
    version=__version__,
    docs_url="/api/docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.state.config = config

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", []),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag log lines with the request and the signed-in account."""
    cookie_name = config.get("session_cookie_name", "graph_tutorial_session")
    bind_request_context(
        request.method,
        request.url.path,
        request.cookies.get(cookie_name),
    )
    response = await call_next(request)
    logger.debug("request_finished", status=response.status_code)
    return response


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(SignInRequired)
async def sign_in_required_handler(request: Request, exc: SignInRequired):
    """Send the user through sign-in."""
    return RedirectResponse("/auth/signin", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), code=f"HTTP_{exc.status_code}").model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").model_dump(),
    )


app.include_router(web_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "graph_tutorial.web.main:app",
        host=config.get("host", "127.0.0.1"),
        port=config.get("port", 5000),
        reload=True,
        log_level="info",
    )

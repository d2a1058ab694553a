"""
Home Routes

- GET / - Welcome page
- GET /health - Health check
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from graph_tutorial import get_connection
from graph_tutorial.web import pages
from graph_tutorial.web.dependencies import get_optional_account
from graph_tutorial.web.models import HealthCheck


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    account: dict[str, Any] | None = Depends(get_optional_account),
):
    return pages.page_response(request, "Home", pages.home_content(account), account)


@router.get("/health", response_model=HealthCheck)
async def health_check():
    """Check that the account store is reachable."""
    services = {}

    try:
        conn = get_connection()
        conn.execute("SELECT 1")
        conn.close()
        services["database"] = "healthy"
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        services["database"] = "unhealthy"

    overall = "healthy" if services["database"] == "healthy" else "degraded"
    return HealthCheck(status=overall, services=services)

"""
One-shot alert messages carried across a redirect in a cookie.

Usage:
    response = RedirectResponse("/calendar", status_code=303)
    return with_success(response, "Event created")
"""

import base64
import json
import logging
from typing import Any

from fastapi import Request
from fastapi.responses import Response


logger = logging.getLogger(__name__)

FLASH_COOKIE_NAME = "graph_tutorial_flash"


def make_alert(kind: str, message: str, debug: str | None = None) -> dict[str, Any]:
    """Alert dict as the page layout renders it. ``kind`` is a Bootstrap context."""
    return {"kind": kind, "message": message, "debug": debug}


def set_flash(response: Response, kind: str, message: str, debug: str | None = None) -> Response:
    payload = json.dumps(make_alert(kind, message, debug)).encode("utf-8")
    response.set_cookie(
        FLASH_COOKIE_NAME,
        base64.urlsafe_b64encode(payload).decode("ascii"),
        max_age=60,
        httponly=True,
        samesite="lax",
    )
    return response


def with_success(response: Response, message: str, debug: str | None = None) -> Response:
    return set_flash(response, "success", message, debug)


def with_error(response: Response, message: str, debug: str | None = None) -> Response:
    return set_flash(response, "danger", message, debug)


def read_flash(request: Request) -> dict[str, Any] | None:
    """Decode the pending flash message, if any."""
    raw = request.cookies.get(FLASH_COOKIE_NAME)
    if not raw:
        return None
    try:
        data = json.loads(base64.urlsafe_b64decode(raw.encode("ascii")))
    except (ValueError, UnicodeError) as e:
        logger.warning("Discarding malformed flash cookie: %s", e)
        return None
    if not isinstance(data, dict) or "message" not in data:
        return None
    return make_alert(data.get("kind", "info"), str(data["message"]), data.get("debug"))


def clear_flash(request: Request, response: Response) -> None:
    if FLASH_COOKIE_NAME in request.cookies:
        response.delete_cookie(FLASH_COOKIE_NAME)

"""
Request dependencies: the signed-in account and its mail/calendar provider.
"""

import logging
from typing import Any

from fastapi import Depends, Request

from graph_tutorial import get_account
from graph_tutorial.graph.oauth_manager import get_valid_access_token
from graph_tutorial.graph.providers.base import MailCalendarProvider
from graph_tutorial.graph.providers.microsoft_graph import GraphProvider


logger = logging.getLogger(__name__)

DEFAULT_SESSION_COOKIE = "graph_tutorial_session"


class SignInRequired(Exception):
    """The request needs a signed-in user; the app redirects to sign-in."""


def session_cookie_name(request: Request) -> str:
    config = getattr(request.app.state, "config", None) or {}
    return config.get("session_cookie_name", DEFAULT_SESSION_COOKIE)


def create_provider(access_token: str) -> MailCalendarProvider:
    return GraphProvider(access_token)


async def get_optional_account(request: Request) -> dict[str, Any] | None:
    """The signed-in account, or None."""
    account_id = request.cookies.get(session_cookie_name(request))
    if not account_id:
        return None

    result = get_account(account_id)
    if not result.get("success"):
        return None
    return result["account"]


async def get_current_account(
    account: dict[str, Any] | None = Depends(get_optional_account),
) -> dict[str, Any]:
    """The signed-in account; redirects to sign-in when there is none."""
    if account is None:
        raise SignInRequired()
    return account


async def get_provider(
    account: dict[str, Any] = Depends(get_current_account),
) -> MailCalendarProvider:
    """Provider for the signed-in account with a fresh access token."""
    token = await get_valid_access_token(account["id"])
    if not token:
        logger.info("No usable token for account %s, restarting sign-in", account["id"])
        raise SignInRequired()
    return create_provider(token)

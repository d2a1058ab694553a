"""
Auth Routes - Microsoft sign-in and sign-out

- GET /auth/signin - Redirect to the Microsoft authorization endpoint
- GET /auth/callback - OAuth callback, stores the account and sets the session cookie
- GET /auth/signout - Forget the account
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from graph_tutorial import delete_account, save_account
from graph_tutorial.config import get_redirect_uri
from graph_tutorial.graph.oauth_manager import (
    exchange_code_for_tokens,
    generate_authorization_url,
    parse_state,
)
from graph_tutorial.web import dependencies
from graph_tutorial.web.flash import with_error, with_success


logger = logging.getLogger(__name__)

router = APIRouter()

NONCE_COOKIE_NAME = "graph_tutorial_oauth_nonce"


@router.get("/signin")
async def signin(request: Request):
    """Start the authorization code flow."""
    result = generate_authorization_url(redirect_uri=get_redirect_uri())
    if not result.get("success"):
        logger.error("Cannot start sign-in: %s", result.get("error"))
        return with_error(
            RedirectResponse("/", status_code=303),
            "Sign-in is not configured",
            result.get("error"),
        )

    response = RedirectResponse(result["authorization_url"], status_code=303)
    response.set_cookie(
        NONCE_COOKIE_NAME,
        result["nonce"],
        max_age=600,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/callback")
async def callback(
    request: Request,
    code: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    state: str | None = None,
):
    """
    Handle the Microsoft OAuth callback.

    Exchanges the authorization code for tokens, reads the user's profile
    and mailbox time zone, and stores the account.
    """
    if error:
        logger.warning("Sign-in failed: %s %s", error, error_description or "")
        response = with_error(
            RedirectResponse("/", status_code=303),
            "Sign-in failed",
            error_description or error,
        )
        response.delete_cookie(NONCE_COOKIE_NAME)
        return response

    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    parsed_state = parse_state(state)
    expected_nonce = request.cookies.get(NONCE_COOKIE_NAME)
    if not expected_nonce or parsed_state["nonce"] != expected_nonce:
        logger.warning("OAuth state mismatch on callback")
        return with_error(
            RedirectResponse("/", status_code=303),
            "Sign-in failed",
            "The sign-in request could not be verified. Please try again.",
        )

    result = await exchange_code_for_tokens(
        code,
        code_verifier=parsed_state["code_verifier"],
        redirect_uri=get_redirect_uri(),
    )
    if not result.get("success"):
        return with_error(RedirectResponse("/", status_code=303), "Sign-in failed", result.get("error"))

    access_token = result.get("access_token")
    if not access_token:
        raise HTTPException(status_code=500, detail="Token exchange did not return access token")

    provider = dependencies.create_provider(access_token)

    user_info = await provider.get_user_info()
    if not user_info.get("success"):
        return with_error(
            RedirectResponse("/", status_code=303),
            "Error getting user profile",
            user_info.get("error"),
        )

    tz_result = await provider.get_mailbox_time_zone()
    if tz_result.get("success"):
        time_zone = tz_result["time_zone"]
    else:
        logger.warning("Mailbox time zone unavailable, using UTC: %s", tz_result.get("error"))
        time_zone = "UTC"

    saved = save_account(
        access_token=access_token,
        refresh_token=result.get("refresh_token"),
        expires_in=result.get("expires_in", 3600),
        scopes=result.get("scope", "").split(),
        email=user_info.get("email") or "",
        name=user_info.get("name"),
        time_zone=time_zone,
    )
    logger.info("Signed in %s (account %s)", user_info.get("email"), saved["account_id"])

    response = RedirectResponse("/", status_code=303)
    response.set_cookie(
        dependencies.session_cookie_name(request),
        saved["account_id"],
        httponly=True,
        samesite="lax",
    )
    response.delete_cookie(NONCE_COOKIE_NAME)
    return with_success(response, f"Signed in as {user_info.get('name') or user_info.get('email')}")


@router.get("/signout")
async def signout(request: Request):
    """Forget the signed-in account."""
    cookie_name = dependencies.session_cookie_name(request)
    account_id = request.cookies.get(cookie_name)
    if account_id:
        delete_account(account_id)

    response = RedirectResponse("/", status_code=303)
    response.delete_cookie(cookie_name)
    return response

"""
Tool: OAuth Manager
Purpose: OAuth 2.0 authorization code flow for the Microsoft identity platform

Handles:
- Authorization URL generation (with PKCE)
- Token exchange (auth code -> tokens)
- Token refresh, proactive when the stored token is about to expire

Usage:
    python -m graph_tutorial.graph.oauth_manager --action authorize
    python -m graph_tutorial.graph.oauth_manager --action exchange --code <code> --verifier <v>
    python -m graph_tutorial.graph.oauth_manager --action refresh --account-id <id>

Dependencies:
    - httpx (pip install httpx)
"""

import argparse
import base64
import hashlib
import json
import logging
import secrets
import sys
import uuid
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx

from graph_tutorial import get_account, update_account_tokens
from graph_tutorial.config import get_microsoft_credentials, get_redirect_uri
from graph_tutorial.graph import SCOPES


logger = logging.getLogger(__name__)


MICROSOFT_AUTH_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/authorize"
MICROSOFT_TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"

# offline_access gets us a refresh token
REQUESTED_SCOPES = [*SCOPES, "offline_access"]


def _generate_pkce_pair() -> tuple[str, str]:
    """
    Generate PKCE code verifier and challenge pair per RFC 7636.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    verifier_bytes = secrets.token_bytes(43)
    code_verifier = base64.urlsafe_b64encode(verifier_bytes).rstrip(b"=").decode("ascii")

    challenge_bytes = hashlib.sha256(code_verifier.encode("ascii")).digest()
    code_challenge = base64.urlsafe_b64encode(challenge_bytes).rstrip(b"=").decode("ascii")

    return code_verifier, code_challenge


def parse_state(state: str | None) -> dict[str, Any]:
    """Parse the OAuth state JSON to extract the PKCE verifier and nonce.

    Returns dict with keys: code_verifier, nonce. Values are None if the
    state is missing or malformed.
    """
    result = {"code_verifier": None, "nonce": None}
    if not state:
        return result
    try:
        state_data = json.loads(state)
        if isinstance(state_data, dict):
            result["code_verifier"] = state_data.get("code_verifier")
            result["nonce"] = state_data.get("nonce")
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Failed to parse OAuth state: %s", e)
    return result


def generate_authorization_url(
    state: str | None = None,
    redirect_uri: str | None = None,
) -> dict[str, Any]:
    """
    Generate the authorization URL the user is sent to for sign-in.

    Args:
        state: Optional nonce for CSRF protection (generated if omitted)
        redirect_uri: Optional override for redirect URI

    Returns:
        dict with authorization URL, state and code verifier
    """
    nonce = state or str(uuid.uuid4())
    code_verifier, code_challenge = _generate_pkce_pair()

    # Verifier rides in the state so the callback needs no server-side lookup
    state_with_verifier = json.dumps({"nonce": nonce, "code_verifier": code_verifier})

    try:
        client_id, _, tenant = get_microsoft_credentials()
    except ValueError as e:
        return {"success": False, "error": str(e)}

    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri or get_redirect_uri(),
        "response_type": "code",
        "scope": " ".join(REQUESTED_SCOPES),
        "state": state_with_verifier,
        "response_mode": "query",
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    url = f"{MICROSOFT_AUTH_URL.format(tenant=tenant)}?{urlencode(params)}"

    return {
        "success": True,
        "authorization_url": url,
        "state": state_with_verifier,
        "nonce": nonce,
        "code_verifier": code_verifier,
        "scopes": REQUESTED_SCOPES,
    }


async def exchange_code_for_tokens(
    code: str,
    code_verifier: str | None = None,
    redirect_uri: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Exchange authorization code for access and refresh tokens.

    Args:
        code: Authorization code from callback
        code_verifier: PKCE code verifier (RFC 7636)
        redirect_uri: Redirect URI used in authorization
        transport: Optional httpx transport (tests)

    Returns:
        dict with tokens
    """
    try:
        client_id, client_secret, tenant = get_microsoft_credentials()
    except ValueError as e:
        return {"success": False, "error": str(e)}

    token_data = {
        "client_id": client_id,
        "client_secret": client_secret,
        "code": code,
        "redirect_uri": redirect_uri or get_redirect_uri(),
        "grant_type": "authorization_code",
        "scope": " ".join(REQUESTED_SCOPES),
    }
    if code_verifier:
        token_data["code_verifier"] = code_verifier

    token_url = MICROSOFT_TOKEN_URL.format(tenant=tenant)

    try:
        async with httpx.AsyncClient(timeout=30.0, transport=transport) as client:
            resp = await client.post(token_url, data=token_data)
    except httpx.HTTPError as e:
        return {"success": False, "error": f"Token exchange error: {e!s}"}

    if resp.status_code != 200:
        return {"success": False, "error": f"Token exchange failed: {_token_error(resp)}"}

    tokens = resp.json()
    return {
        "success": True,
        "access_token": tokens.get("access_token"),
        "refresh_token": tokens.get("refresh_token"),
        "expires_in": tokens.get("expires_in", 3600),
        "scope": tokens.get("scope", ""),
    }


async def refresh_access_token(
    refresh_token: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Refresh an expired access token.

    Args:
        refresh_token: Refresh token
        transport: Optional httpx transport (tests)

    Returns:
        dict with new access token
    """
    try:
        client_id, client_secret, tenant = get_microsoft_credentials()
    except ValueError as e:
        return {"success": False, "error": str(e)}

    token_data = {
        "client_id": client_id,
        "client_secret": client_secret,
        "refresh_token": refresh_token,
        "grant_type": "refresh_token",
        "scope": " ".join(REQUESTED_SCOPES),
    }

    token_url = MICROSOFT_TOKEN_URL.format(tenant=tenant)

    try:
        async with httpx.AsyncClient(timeout=30.0, transport=transport) as client:
            resp = await client.post(token_url, data=token_data)
    except httpx.HTTPError as e:
        return {"success": False, "error": f"Token refresh error: {e!s}"}

    if resp.status_code != 200:
        return {"success": False, "error": f"Token refresh failed: {_token_error(resp)}"}

    tokens = resp.json()
    return {
        "success": True,
        "access_token": tokens.get("access_token"),
        "refresh_token": tokens.get("refresh_token"),  # Microsoft may rotate
        "expires_in": tokens.get("expires_in", 3600),
    }


def _token_error(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if not isinstance(body, dict):
        return resp.text
    return body.get("error_description") or body.get("error") or resp.text


def is_token_expiring_soon(account: dict[str, Any], threshold_minutes: int = 5) -> bool:
    """
    Check if an account's access token is expiring within the threshold.

    Returns:
        True if token expires within threshold, is already expired, or
        has no recorded expiry
    """
    expiry_raw = account.get("token_expiry")
    if not expiry_raw:
        return True

    try:
        expiry = datetime.fromisoformat(expiry_raw)
    except (TypeError, ValueError):
        return True

    return (expiry - datetime.now()) < timedelta(minutes=threshold_minutes)


async def get_valid_access_token(account_id: str) -> str | None:
    """
    Get a valid (non-expired) access token, refreshing proactively if needed.

    Args:
        account_id: Account ID

    Returns:
        Valid access token string, or None if the account is gone or the
        refresh failed
    """
    account_result = get_account(account_id)
    if not account_result.get("success"):
        return None

    account = account_result["account"]
    access_token = account.get("access_token")
    refresh_token = account.get("refresh_token")

    if not is_token_expiring_soon(account):
        return access_token

    if not refresh_token:
        logger.warning("Token expiring for account %s but no refresh token", account_id)
        return access_token  # Caller will see 401 if expired

    logger.info("Proactively refreshing expiring token for account %s", account_id)

    result = await refresh_access_token(refresh_token)
    if not result.get("success"):
        logger.error("Token refresh failed for account %s: %s", account_id, result.get("error"))
        return None

    new_refresh = result.get("refresh_token")
    update_account_tokens(
        account_id,
        result["access_token"],
        result.get("expires_in", 3600),
        refresh_token=new_refresh if new_refresh != refresh_token else None,
    )
    return result["access_token"]


def main():
    parser = argparse.ArgumentParser(description="Microsoft OAuth Manager")
    parser.add_argument(
        "--action",
        required=True,
        choices=["authorize", "exchange", "refresh"],
        help="Action to perform",
    )
    parser.add_argument("--code", help="Authorization code (for exchange)")
    parser.add_argument("--verifier", help="PKCE code verifier (for exchange)")
    parser.add_argument("--account-id", help="Account ID (for refresh)")

    args = parser.parse_args()

    import asyncio

    if args.action == "authorize":
        result = generate_authorization_url()
        if not result["success"]:
            print(f"Error: {result['error']}")
            sys.exit(1)
        print(f"Authorization URL:\n{result['authorization_url']}")
        print(f"\nCode verifier: {result['code_verifier']}")
        print(f"Scopes: {', '.join(result['scopes'])}")

    elif args.action == "exchange":
        if not args.code:
            print("Error: --code required for exchange")
            sys.exit(1)
        result = asyncio.run(exchange_code_for_tokens(args.code, code_verifier=args.verifier))
        print(json.dumps(result, indent=2))

    elif args.action == "refresh":
        if not args.account_id:
            print("Error: --account-id required for refresh")
            sys.exit(1)
        token = asyncio.run(get_valid_access_token(args.account_id))
        if not token:
            print("Error: could not obtain a valid token")
            sys.exit(1)
        print("Token is valid.")


if __name__ == "__main__":
    main()

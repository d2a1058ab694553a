"""
Tool: Microsoft Graph Provider
Purpose: Outlook mail and calendar via the Microsoft Graph API

Implements the MailCalendarProvider interface for Microsoft 365 and
Outlook.com accounts.

Usage:
    from graph_tutorial.graph.providers.microsoft_graph import GraphProvider

    provider = GraphProvider(access_token)
    messages = await provider.get_messages(limit=10)
    events = await provider.get_week_calendar(week_start_utc, "Pacific Standard Time")

Dependencies:
    - httpx (pip install httpx)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from graph_tutorial.graph import GRAPH_API_BASE
from graph_tutorial.graph.models import EventRow, MessageRow, NewEvent, build_graph_event
from graph_tutorial.graph.providers.base import MailCalendarProvider


logger = logging.getLogger(__name__)

MESSAGE_FIELDS = "sender,from,subject,importance"
EVENT_FIELDS = "subject,organizer,start,end"


def _graph_timestamp(value: datetime) -> str:
    """Format an aware datetime as the UTC timestamp Graph expects."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _collection(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Items of a Graph collection response, skipping anything that is not a resource."""
    items = data.get("value")
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class GraphProvider(MailCalendarProvider):
    """
    Microsoft Graph provider for Outlook mail and calendar.
    """

    def __init__(self, access_token: str, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(access_token)
        self._transport = transport

    def _get_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        """Get authorization headers for API requests."""
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _make_request(
        self,
        method: str,
        url: str,
        data: dict | None = None,
        params: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method
            url: Full API URL
            data: Request body (for POST/PATCH)
            params: Query parameters
            headers: Extra request headers

        Returns:
            dict with response data or error
        """
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                resp = await client.request(
                    method,
                    url,
                    headers=self._get_headers(headers),
                    json=data,
                    params=params,
                )
        except httpx.HTTPError as e:
            logger.warning("Graph request %s %s failed: %s", method, url, e)
            return {"success": False, "error": f"Request failed: {e!s}"}

        return self._handle_response(resp)

    def _handle_response(self, resp: httpx.Response) -> dict[str, Any]:
        """Handle API response."""
        if resp.status_code == 204:
            return {"success": True}

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code in (200, 201):
            return {"success": True, "data": data}

        # Graph sends {"error": {"code", "message"}}; the token endpoint and
        # proxies may send {"error": "<code>"} or nothing
        graph_error = data.get("error")
        if isinstance(graph_error, dict):
            code = graph_error.get("code") or "unknown"
            message = graph_error.get("message") or f"HTTP {resp.status_code}"
        else:
            code = graph_error if isinstance(graph_error, str) and graph_error else "unknown"
            message = f"HTTP {resp.status_code}"
        logger.warning("Graph returned %s (%s): %s", resp.status_code, code, message)

        if resp.status_code == 401:
            return {
                "success": False,
                "status": 401,
                "error": "Authentication failed - token may be expired",
                "reauthenticate": True,
            }
        elif resp.status_code == 403:
            return {
                "success": False,
                "status": 403,
                "error": f"Permission denied - insufficient scopes: {message}",
            }
        elif resp.status_code == 404:
            return {"success": False, "status": 404, "error": "Resource not found"}
        return {"success": False, "status": resp.status_code, "error": message}

    async def get_user_info(self) -> dict[str, Any]:
        """Get information about the authenticated user."""
        url = f"{GRAPH_API_BASE}/me"
        params = {"$select": "id,displayName,mail,userPrincipalName"}
        result = await self._make_request("GET", url, params=params)

        if result.get("success"):
            data = result.get("data", {})
            return {
                "success": True,
                "email": data.get("mail") or data.get("userPrincipalName"),
                "name": data.get("displayName"),
                "id": data.get("id"),
            }
        return result

    async def get_mailbox_time_zone(self) -> dict[str, Any]:
        """Get the mailbox time zone (usually a Windows zone name)."""
        url = f"{GRAPH_API_BASE}/me/mailboxSettings"
        params = {"$select": "timeZone"}
        result = await self._make_request("GET", url, params=params)

        if result.get("success"):
            return {
                "success": True,
                "time_zone": result.get("data", {}).get("timeZone") or "UTC",
            }
        return result

    # =========================================================================
    # Mail
    # =========================================================================

    async def get_messages(self, limit: int = 10) -> dict[str, Any]:
        """Get the most recent messages, whether or not they are in the Inbox."""
        url = f"{GRAPH_API_BASE}/me/messages"
        params = {
            "$top": limit,
            "$select": MESSAGE_FIELDS,
        }

        result = await self._make_request("GET", url, params=params)
        if not result.get("success"):
            return result

        items = _collection(result["data"])
        messages = [MessageRow.from_graph(item) for item in items]

        return {
            "success": True,
            "messages": messages,
            "total": len(messages),
            "has_more": "@odata.nextLink" in result.get("data", {}),
        }

    # =========================================================================
    # Calendar
    # =========================================================================

    async def get_week_calendar(
        self,
        week_start_utc: datetime,
        time_zone: str,
        week_end_utc: datetime | None = None,
        max_results: int = 50,
    ) -> dict[str, Any]:
        """Get the expanded calendar view for one week."""
        if week_end_utc is None:
            week_end_utc = week_start_utc + timedelta(days=7)

        # calendarView expands recurring events into occurrences
        url = f"{GRAPH_API_BASE}/me/calendarView"
        params = {
            "startDateTime": _graph_timestamp(week_start_utc),
            "endDateTime": _graph_timestamp(week_end_utc),
            "$select": EVENT_FIELDS,
            "$orderby": "start/dateTime",
            "$top": max_results,
        }
        headers = {"Prefer": f'outlook.timezone="{time_zone}"'}

        result = await self._make_request("GET", url, params=params, headers=headers)
        if not result.get("success"):
            return result

        items = _collection(result["data"])
        events = [EventRow.from_graph(item) for item in items]

        return {"success": True, "events": events, "total": len(events)}

    async def create_event(self, new_event: NewEvent, time_zone: str) -> dict[str, Any]:
        """Create a calendar event in the user's default calendar."""
        data = build_graph_event(new_event, time_zone)

        url = f"{GRAPH_API_BASE}/me/events"
        result = await self._make_request("POST", url, data=data)

        if result.get("success"):
            event_id = result.get("data", {}).get("id")
            logger.info("Created event %s", event_id)
            return {"success": True, "event_id": event_id}
        return result

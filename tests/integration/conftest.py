"""
Integration test fixtures for the Graph Tutorial web app.

Provides:
- A FastAPI TestClient against an isolated account store
- A fake mail/calendar provider standing in for Microsoft Graph
- A signed-in client (session cookie for a stored account)
"""

from collections.abc import Generator
from datetime import datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from graph_tutorial.graph.models import EventRow, MessageRow, NewEvent
from graph_tutorial.graph.providers.base import MailCalendarProvider


# ─────────────────────────────────────────────────────────────────────────────
# Fake Provider
# ─────────────────────────────────────────────────────────────────────────────


class FakeProvider(MailCalendarProvider):
    """In-memory provider that records calls and returns canned results."""

    def __init__(self, access_token: str = "access-123"):
        super().__init__(access_token)
        self.calls: list[tuple[str, Any]] = []
        self.user_info: dict[str, Any] = {
            "success": True,
            "email": "megan@contoso.com",
            "name": "Megan Bowen",
            "id": "user-1",
        }
        self.time_zone_result: dict[str, Any] = {
            "success": True,
            "time_zone": "Pacific Standard Time",
        }
        self.messages_result: dict[str, Any] = {"success": True, "messages": [], "total": 0}
        self.calendar_result: dict[str, Any] = {"success": True, "events": [], "total": 0}
        self.create_result: dict[str, Any] = {"success": True, "event_id": "event-1"}

    async def get_user_info(self) -> dict[str, Any]:
        self.calls.append(("get_user_info", None))
        return self.user_info

    async def get_mailbox_time_zone(self) -> dict[str, Any]:
        self.calls.append(("get_mailbox_time_zone", None))
        return self.time_zone_result

    async def get_messages(self, limit: int = 10) -> dict[str, Any]:
        self.calls.append(("get_messages", {"limit": limit}))
        return self.messages_result

    async def get_week_calendar(
        self,
        week_start_utc: datetime,
        time_zone: str,
        week_end_utc: datetime | None = None,
        max_results: int = 50,
    ) -> dict[str, Any]:
        self.calls.append(
            (
                "get_week_calendar",
                {"start": week_start_utc, "time_zone": time_zone, "end": week_end_utc},
            )
        )
        return self.calendar_result

    async def create_event(self, new_event: NewEvent, time_zone: str) -> dict[str, Any]:
        self.calls.append(("create_event", {"event": new_event, "time_zone": time_zone}))
        return self.create_result


@pytest.fixture
def fake_provider(graph_messages, graph_events) -> FakeProvider:
    provider = FakeProvider()
    messages = [MessageRow.from_graph(m) for m in graph_messages]
    events = [EventRow.from_graph(e) for e in graph_events]
    provider.messages_result = {"success": True, "messages": messages, "total": len(messages)}
    provider.calendar_result = {"success": True, "events": events, "total": len(events)}
    return provider


# ─────────────────────────────────────────────────────────────────────────────
# Client Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def app(account_store):
    """The FastAPI app with the account store pointed at a temp database."""
    from graph_tutorial.web.main import app

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Signed-out test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signed_in_client(app, client, saved_account, fake_provider) -> TestClient:
    """Client carrying the session cookie of ``saved_account``.

    The provider dependency is replaced with ``fake_provider``.
    """
    from graph_tutorial.web.dependencies import get_provider

    app.dependency_overrides[get_provider] = lambda: fake_provider
    client.cookies.set("graph_tutorial_session", saved_account["id"])
    return client

"""Shared test fixtures for Graph Tutorial tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- Sample Graph API payloads
- A stored test account

Usage:
    def test_something(account_store):
        # account_store is graph_tutorial with DB_PATH pointing at a temp file
        ...
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Environment
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def microsoft_credentials(monkeypatch) -> None:
    """Fake app registration credentials for every test."""
    monkeypatch.setenv("MICROSOFT_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("MICROSOFT_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("MICROSOFT_TENANT", "common")
    monkeypatch.delenv("MICROSOFT_REDIRECT_URI", raising=False)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def account_store(temp_db):
    """Patch the account store to use a temporary database."""
    with patch("graph_tutorial.DB_PATH", temp_db):
        import graph_tutorial

        conn = graph_tutorial.get_connection()
        conn.close()

        yield graph_tutorial


@pytest.fixture
def saved_account(account_store) -> dict:
    """A signed-in account stored in the temporary database.

    Returns:
        dict with account fields as get_account returns them
    """
    result = account_store.save_account(
        access_token="access-123",
        refresh_token="refresh-456",
        expires_in=3600,
        scopes=["User.Read", "Calendars.ReadWrite"],
        email="megan@contoso.com",
        name="Megan Bowen",
        time_zone="Pacific Standard Time",
    )
    return account_store.get_account(result["account_id"])["account"]


# ─────────────────────────────────────────────────────────────────────────────
# Graph Payload Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def graph_messages() -> list[dict]:
    """Messages as GET /me/messages returns them with $select=sender,from,subject,importance."""
    return [
        {
            "id": "AAMkAGI2THVSAAA=",
            "subject": "Quarterly review",
            "importance": "high",
            "sender": {"emailAddress": {"name": "Adele Vance", "address": "adele@contoso.com"}},
            "from": {"emailAddress": {"name": "Adele Vance", "address": "adele@contoso.com"}},
        },
        {
            "id": "AAMkAGI2THVSAAB=",
            "subject": None,
            "importance": "normal",
            "sender": None,
            "from": None,
        },
        {
            "id": "AAMkAGI2THVSAAC=",
            "subject": "Lunch?",
            "importance": "low",
            "sender": {"emailAddress": {"name": None, "address": "alex@contoso.com"}},
        },
    ]


@pytest.fixture
def graph_events() -> list[dict]:
    """Events as GET /me/calendarView returns them."""
    return [
        {
            "id": "AAMkAGUzYRQAAA=",
            "subject": "Team standup",
            "organizer": {"emailAddress": {"name": "Megan Bowen", "address": "megan@contoso.com"}},
            "start": {"dateTime": "2024-03-11T09:00:00.0000000", "timeZone": "Pacific Standard Time"},
            "end": {"dateTime": "2024-03-11T09:15:00.0000000", "timeZone": "Pacific Standard Time"},
        },
        {
            "id": "AAMkAGUzYRQAAB=",
            "subject": "",
            "organizer": {},
            "start": {"dateTime": "2024-03-13T14:00:00.0000000", "timeZone": "Pacific Standard Time"},
            "end": {"dateTime": "2024-03-13T15:00:00.0000000", "timeZone": "Pacific Standard Time"},
        },
    ]

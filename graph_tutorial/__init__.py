"""Graph Tutorial: Mail and Calendar over Microsoft Graph

A small web app that signs a user in with their Microsoft account, lists
their recent mail, shows the current week of their calendar and creates
calendar events.

Components:
    config.py: YAML and environment configuration
    logging_config.py: structlog setup
    graph/week.py: Sunday-start week window in the user's time zone
    graph/timezones.py: IANA and Windows time zone lookup
    graph/models.py: Display rows, view models, new-event form
    graph/oauth_manager.py: OAuth flow for the Microsoft identity platform
    graph/providers/: Mail/calendar provider interface and Graph implementation
    web/: FastAPI application
    cli.py: `graph-tutorial` command
"""

import json
import os
import sqlite3
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any


__version__ = "0.1.0"

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "args"
DATA_PATH = PROJECT_ROOT / "data"
DB_PATH = Path(os.environ.get("GRAPH_TUTORIAL_DB", str(DATA_PATH / "graph_tutorial.db")))


def get_connection() -> sqlite3.Connection:
    """
    Get database connection, creating tables if needed.

    Returns:
        SQLite connection with row_factory set
    """
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row

    cursor = conn.cursor()

    # Signed-in accounts, keyed by the session cookie value
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id TEXT PRIMARY KEY,
            email_address TEXT,
            display_name TEXT,
            time_zone TEXT DEFAULT 'UTC',
            access_token TEXT,
            refresh_token TEXT,
            token_expiry DATETIME,
            scopes TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_accounts_email ON accounts(email_address)"
    )

    conn.commit()
    return conn


def save_account(
    access_token: str,
    refresh_token: str | None,
    expires_in: int,
    scopes: list[str],
    email: str,
    name: str | None = None,
    time_zone: str = "UTC",
    account_id: str | None = None,
) -> dict[str, Any]:
    """
    Save or update a signed-in account with its tokens.

    Args:
        access_token: Graph access token
        refresh_token: Refresh token (None when offline_access was not granted)
        expires_in: Access token lifetime in seconds
        scopes: Granted scopes
        email: Account email address
        name: Display name
        time_zone: Mailbox time zone identifier
        account_id: Existing account ID to update

    Returns:
        dict with success status and account_id
    """
    account_id = account_id or str(uuid.uuid4())
    now = datetime.now()
    token_expiry = now + timedelta(seconds=expires_in)

    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO accounts (
            id, email_address, display_name, time_zone, access_token,
            refresh_token, token_expiry, scopes, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            email_address = excluded.email_address,
            display_name = excluded.display_name,
            time_zone = excluded.time_zone,
            access_token = excluded.access_token,
            refresh_token = COALESCE(excluded.refresh_token, accounts.refresh_token),
            token_expiry = excluded.token_expiry,
            scopes = excluded.scopes,
            updated_at = excluded.updated_at
        """,
        (
            account_id,
            email,
            name,
            time_zone,
            access_token,
            refresh_token,
            token_expiry.isoformat(),
            json.dumps(scopes),
            now.isoformat(),
            now.isoformat(),
        ),
    )
    conn.commit()
    conn.close()

    return {"success": True, "account_id": account_id}


def get_account(account_id: str) -> dict[str, Any]:
    """
    Load an account by ID.

    Returns:
        dict with success status and the account as a dict
    """
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM accounts WHERE id = ?", (account_id,))
    row = cursor.fetchone()
    conn.close()

    if not row:
        return {"success": False, "error": "Account not found"}

    account = dict(row)
    account["scopes"] = json.loads(account["scopes"]) if account["scopes"] else []
    return {"success": True, "account": account}


def update_account_tokens(
    account_id: str,
    access_token: str,
    expires_in: int,
    refresh_token: str | None = None,
) -> None:
    """Persist a refreshed access token (and a rotated refresh token, if any)."""
    new_expiry = datetime.now() + timedelta(seconds=expires_in)

    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE accounts SET
            access_token = ?,
            refresh_token = COALESCE(?, refresh_token),
            token_expiry = ?,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
        """,
        (access_token, refresh_token, new_expiry.isoformat(), account_id),
    )
    conn.commit()
    conn.close()


def delete_account(account_id: str) -> dict[str, Any]:
    """
    Delete an account and its tokens.

    Args:
        account_id: Account ID

    Returns:
        dict with success status
    """
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()

    if not deleted:
        return {"success": False, "error": "Account not found"}
    return {"success": True, "message": f"Account {account_id} deleted"}

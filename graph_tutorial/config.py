"""
Configuration for the Graph Tutorial app.

Non-secret settings come from ``args/graph_tutorial.yaml`` (or the file
named by ``GRAPH_TUTORIAL_CONFIG``). Secrets come from the environment,
with a ``.env`` file loaded first.

Usage:
    from graph_tutorial.config import load_config, get_microsoft_credentials

    config = load_config()
    client_id, client_secret, tenant = get_microsoft_credentials()
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from graph_tutorial import CONFIG_PATH


load_dotenv()


DEFAULTS: dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 5000,
    "redirect_uri": "http://localhost:5000/auth/callback",
    "session_cookie_name": "graph_tutorial_session",
    "message_page_size": 10,
    "allowed_origins": ["http://localhost:5000", "http://127.0.0.1:5000"],
}


def get_config_path() -> Path:
    override = os.environ.get("GRAPH_TUTORIAL_CONFIG")
    if override:
        return Path(override)
    return CONFIG_PATH / "graph_tutorial.yaml"


def load_config() -> dict[str, Any]:
    """Load app configuration from YAML, layered over the defaults."""
    config = dict(DEFAULTS)

    config_path = get_config_path()
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
            config.update(data.get("graph_tutorial", {}) or {})

    return config


def get_microsoft_credentials() -> tuple[str, str, str]:
    """
    Get Microsoft OAuth credentials from the environment.

    Returns:
        Tuple of (client_id, client_secret, tenant)

    Raises:
        ValueError: If credentials not found
    """
    client_id = os.environ.get("MICROSOFT_CLIENT_ID")
    client_secret = os.environ.get("MICROSOFT_CLIENT_SECRET")
    tenant = os.environ.get("MICROSOFT_TENANT", "common")

    if not client_id or not client_secret:
        raise ValueError(
            "Microsoft OAuth credentials not found. "
            "Set MICROSOFT_CLIENT_ID and MICROSOFT_CLIENT_SECRET environment variables."
        )

    return client_id, client_secret, tenant


def get_redirect_uri() -> str:
    """Get the OAuth redirect URI registered for the app."""
    return os.environ.get("MICROSOFT_REDIRECT_URI") or load_config()["redirect_uri"]

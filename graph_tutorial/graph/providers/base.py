"""
Tool: Mail/Calendar Provider Base
Purpose: Abstract interface the web layer uses to reach the user's mailbox

Usage:
    from graph_tutorial.graph.providers.microsoft_graph import GraphProvider

    provider = GraphProvider(access_token)
    result = await provider.get_messages(limit=10)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from graph_tutorial.graph.models import NewEvent


class MailCalendarProvider(ABC):
    """
    Abstract base class for mail/calendar providers.

    Every operation returns a dict with a ``success`` flag. Failures carry
    ``error`` (a message safe to show the user), ``status`` (HTTP status,
    when there was one) and ``reauthenticate`` (True when the user has to
    sign in again).
    """

    def __init__(self, access_token: str):
        """
        Initialize provider with a bearer token.

        Args:
            access_token: OAuth access token for the signed-in user
        """
        self.access_token = access_token

    @abstractmethod
    async def get_user_info(self) -> dict[str, Any]:
        """
        Get information about the authenticated user.

        Returns:
            dict with email, name and id
        """
        pass

    @abstractmethod
    async def get_mailbox_time_zone(self) -> dict[str, Any]:
        """
        Get the time zone configured on the user's mailbox.

        Returns:
            dict with time_zone (identifier as the provider reports it)
        """
        pass

    @abstractmethod
    async def get_messages(self, limit: int = 10) -> dict[str, Any]:
        """
        Get the most recent messages, in any folder.

        Args:
            limit: Maximum number of messages

        Returns:
            dict with messages (list of MessageRow, source order) and total
        """
        pass

    @abstractmethod
    async def get_week_calendar(
        self,
        week_start_utc: datetime,
        time_zone: str,
        week_end_utc: datetime | None = None,
        max_results: int = 50,
    ) -> dict[str, Any]:
        """
        Get the calendar view for one week.

        Args:
            week_start_utc: Query range lower bound (aware, UTC)
            time_zone: Zone event times are reported in
            week_end_utc: Query range upper bound (default: start + 7 days)
            max_results: Maximum events to return

        Returns:
            dict with events (list of EventRow) and total
        """
        pass

    @abstractmethod
    async def create_event(self, new_event: NewEvent, time_zone: str) -> dict[str, Any]:
        """
        Create a calendar event.

        Args:
            new_event: Bound form fields
            time_zone: Zone the start/end wall-clock times are in

        Returns:
            dict with event_id
        """
        pass

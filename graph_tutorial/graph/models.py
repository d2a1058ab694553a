"""
Tool: Graph Models
Purpose: Display rows, view models and the new-event form

Usage:
    from graph_tutorial.graph.models import MessageRow, MailViewModel, NewEvent

Rows are built from raw Graph JSON and carry only what the pages show.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator


UNKNOWN_SENDER_NAME = "Unknown name"
UNKNOWN_SENDER_ADDRESS = "Unknown email"
NO_SUBJECT = "No subject"


@dataclass
class MessageRow:
    """
    One row of the mail listing.
    """

    id: str
    sender: str = UNKNOWN_SENDER_NAME
    from_address: str = UNKNOWN_SENDER_ADDRESS
    subject: str = NO_SUBJECT
    importance: str = "normal"

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> "MessageRow":
        """Build a row from a Graph message resource."""
        sender = (data.get("sender") or {}).get("emailAddress")

        return cls(
            id=data.get("id", ""),
            sender=(sender.get("name") or UNKNOWN_SENDER_NAME) if sender else UNKNOWN_SENDER_NAME,
            from_address=(
                (sender.get("address") or UNKNOWN_SENDER_ADDRESS)
                if sender
                else UNKNOWN_SENDER_ADDRESS
            ),
            subject=data.get("subject") or NO_SUBJECT,
            importance=data.get("importance") or "normal",
        )


def parse_graph_datetime(value: dict[str, Any] | None) -> datetime | None:
    """Parse a Graph dateTimeTimeZone value into a naive wall-clock datetime."""
    if not value or not value.get("dateTime"):
        return None

    raw = value["dateTime"]
    # Graph sends seven fractional digits, fromisoformat accepts at most six
    if "." in raw:
        head, _, frac = raw.partition(".")
        raw = f"{head}.{frac[:6]}"
    try:
        return datetime.fromisoformat(raw.replace("Z", ""))
    except ValueError:
        return None


@dataclass
class EventRow:
    """
    One row of the week calendar.
    """

    id: str
    subject: str = NO_SUBJECT
    organizer: str = UNKNOWN_SENDER_NAME
    start: datetime | None = None
    end: datetime | None = None

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> "EventRow":
        """Build a row from a Graph event resource."""
        organizer = (data.get("organizer") or {}).get("emailAddress") or {}

        return cls(
            id=data.get("id", ""),
            subject=data.get("subject") or NO_SUBJECT,
            organizer=organizer.get("name") or UNKNOWN_SENDER_NAME,
            start=parse_graph_datetime(data.get("start")),
            end=parse_graph_datetime(data.get("end")),
        )


@dataclass
class MailViewModel:
    """Model for the mail listing page."""

    messages: list[MessageRow] = field(default_factory=list)
    week_start_utc: datetime | None = None


@dataclass
class CalendarViewModel:
    """Model for the week calendar page."""

    events: list[EventRow] = field(default_factory=list)
    week_start_utc: datetime | None = None
    time_zone: str = "UTC"


class NewEvent(BaseModel):
    """Fields bound from the new-event form."""

    subject: str = Field(..., min_length=1, description="Event subject")
    attendees: str | None = Field(None, description="Attendee emails separated by ';'")
    start: datetime = Field(..., description="Start, wall-clock in the user's zone")
    end: datetime = Field(..., description="End, wall-clock in the user's zone")
    body: str | None = Field(None, description="Plain text body")

    @model_validator(mode="after")
    def check_range(self) -> "NewEvent":
        if self.end < self.start:
            raise ValueError("End must not be before start")
        return self

    def attendee_list(self) -> list[str]:
        """Split the attendees field on ';', dropping empty entries."""
        if not self.attendees:
            return []
        return [a.strip() for a in self.attendees.split(";") if a.strip()]


def build_graph_event(new_event: NewEvent, time_zone: str) -> dict[str, Any]:
    """
    Build the Graph event payload for a new event.

    Start and end stay wall-clock times tagged with the user's zone, so
    Graph does the conversion.

    Args:
        new_event: Bound form fields
        time_zone: Mailbox time zone identifier

    Returns:
        JSON-serializable dict for POST /me/events
    """
    data: dict[str, Any] = {
        "subject": new_event.subject,
        "start": {
            "dateTime": new_event.start.replace(tzinfo=None).isoformat(),
            "timeZone": time_zone,
        },
        "end": {
            "dateTime": new_event.end.replace(tzinfo=None).isoformat(),
            "timeZone": time_zone,
        },
    }

    if new_event.body:
        data["body"] = {
            "contentType": "text",
            "content": new_event.body,
        }

    attendees = new_event.attendee_list()
    if attendees:
        data["attendees"] = [
            {"emailAddress": {"address": a}, "type": "required"}
            for a in attendees
        ]

    return data

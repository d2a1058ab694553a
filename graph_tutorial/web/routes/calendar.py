"""
Calendar Routes

- GET /calendar - The current week of the signed-in user's calendar
- GET /calendar/new - New event form
- POST /calendar/new - Create the event
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from graph_tutorial.graph.models import CalendarViewModel, NewEvent
from graph_tutorial.graph.providers.base import MailCalendarProvider
from graph_tutorial.graph.timezones import UnknownTimeZone, get_zone
from graph_tutorial.graph.week import resolve_week_window_utc
from graph_tutorial.web import pages
from graph_tutorial.web.dependencies import SignInRequired, get_current_account, get_provider
from graph_tutorial.web.flash import make_alert, with_error, with_success


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_class=HTMLResponse)
async def calendar_index(
    request: Request,
    account: dict[str, Any] = Depends(get_current_account),
    provider: MailCalendarProvider = Depends(get_provider),
):
    """Show the calendar week (Sunday start) containing today in the user's zone."""
    time_zone = account["time_zone"]
    try:
        zone = get_zone(time_zone)
        today = datetime.now(zone).date()
        week_start_utc, week_end_utc = resolve_week_window_utc(today, zone)
    except UnknownTimeZone as e:
        logger.warning("Account %s has unknown time zone: %s", account["id"], e)
        return pages.page_response(
            request,
            "Calendar",
            pages.calendar_content(CalendarViewModel(time_zone=time_zone)),
            account,
            alert=make_alert("danger", "Error getting calendar view", str(e)),
        )

    result = await provider.get_week_calendar(week_start_utc, time_zone, week_end_utc)
    model = CalendarViewModel(week_start_utc=week_start_utc, time_zone=time_zone)
    week_start_local = week_start_utc.astimezone(zone)

    if not result.get("success"):
        if result.get("reauthenticate"):
            raise SignInRequired()
        return pages.page_response(
            request,
            "Calendar",
            pages.calendar_content(model, week_start_local),
            account,
            alert=make_alert("danger", "Error getting calendar view", result.get("error")),
        )

    model.events = result["events"]
    return pages.page_response(
        request,
        "Calendar",
        pages.calendar_content(model, week_start_local),
        account,
    )


@router.get("/new", response_class=HTMLResponse)
async def new_event_form(
    request: Request,
    account: dict[str, Any] = Depends(get_current_account),
):
    return pages.page_response(request, "New event", pages.new_event_content(), account)


@router.post("/new")
async def create_event(
    request: Request,
    subject: str = Form(""),
    attendees: str | None = Form(None),
    start: str = Form(""),
    end: str = Form(""),
    body: str | None = Form(None),
    account: dict[str, Any] = Depends(get_current_account),
    provider: MailCalendarProvider = Depends(get_provider),
):
    """Create an event in the user's time zone and go back to the calendar."""
    values = {"subject": subject, "attendees": attendees, "start": start, "end": end, "body": body}

    try:
        new_event = NewEvent(**values)
    except ValidationError as e:
        problems = "; ".join(err["msg"] for err in e.errors())
        return pages.page_response(
            request,
            "New event",
            pages.new_event_content(values),
            account,
            alert=make_alert("danger", "Please correct the event details", problems),
            status_code=422,
        )

    result = await provider.create_event(new_event, account["time_zone"])

    if not result.get("success"):
        if result.get("reauthenticate"):
            raise SignInRequired()
        return with_error(
            RedirectResponse("/calendar", status_code=303),
            "Error creating event",
            result.get("error"),
        )

    return with_success(RedirectResponse("/calendar", status_code=303), "Event created")

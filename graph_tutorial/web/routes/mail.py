"""
Mail Routes

- GET /mail - The signed-in user's most recent messages
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from graph_tutorial.graph.models import MailViewModel
from graph_tutorial.graph.providers.base import MailCalendarProvider
from graph_tutorial.graph.timezones import UnknownTimeZone, get_zone
from graph_tutorial.graph.week import resolve_week_start_utc
from graph_tutorial.web import pages
from graph_tutorial.web.dependencies import SignInRequired, get_current_account, get_provider
from graph_tutorial.web.flash import make_alert


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_class=HTMLResponse)
async def mail_index(
    request: Request,
    account: dict[str, Any] = Depends(get_current_account),
    provider: MailCalendarProvider = Depends(get_provider),
):
    """List the most recent messages, whether or not they are in the Inbox."""
    try:
        zone = get_zone(account["time_zone"])
    except UnknownTimeZone as e:
        logger.warning("Account %s has unknown time zone: %s", account["id"], e)
        return pages.page_response(
            request,
            "Mail",
            pages.mail_content(MailViewModel()),
            account,
            alert=make_alert("danger", "Error getting messages", str(e)),
        )

    today = datetime.now(zone).date()
    week_start_utc = resolve_week_start_utc(today, zone)

    page_size = request.app.state.config.get("message_page_size", 10)
    result = await provider.get_messages(limit=page_size)

    if not result.get("success"):
        if result.get("reauthenticate"):
            raise SignInRequired()
        return pages.page_response(
            request,
            "Mail",
            pages.mail_content(MailViewModel(week_start_utc=week_start_utc)),
            account,
            alert=make_alert("danger", "Error getting messages", result.get("error")),
        )

    model = MailViewModel(messages=result["messages"], week_start_utc=week_start_utc)
    return pages.page_response(
        request,
        "Mail",
        pages.mail_content(model, week_start_utc.astimezone(zone)),
        account,
    )

"""
HTML pages for the Graph Tutorial app.

Pages are plain strings with every dynamic value escaped. The layout
shows the navigation bar, the signed-in user and at most one alert.
"""

import html
from datetime import datetime
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse

from graph_tutorial.graph.models import CalendarViewModel, MailViewModel
from graph_tutorial.web.flash import clear_flash, read_flash


BOOTSTRAP_CSS = "https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css"


def _e(value: Any) -> str:
    return html.escape("" if value is None else str(value))


def _format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%a %m/%d/%Y %I:%M %p")


def render_alert(alert: dict[str, Any] | None) -> str:
    if not alert:
        return ""
    debug = ""
    if alert.get("debug"):
        debug = f'<pre class="alert-pre border bg-light p-2"><code>{_e(alert["debug"])}</code></pre>'
    return (
        f'<div class="alert alert-{_e(alert.get("kind", "info"))}" role="alert">'
        f'<p class="mb-3">{_e(alert["message"])}</p>{debug}</div>'
    )


def layout(
    title: str,
    content: str,
    account: dict[str, Any] | None = None,
    alerts: list[dict[str, Any]] | None = None,
) -> str:
    """Wrap page content in the site layout."""
    if account:
        user_nav = f"""
            <li class="nav-item"><span class="nav-link">{_e(account.get("display_name"))}</span></li>
            <li class="nav-item"><a class="nav-link" href="/auth/signout">Sign out</a></li>
        """
        links = """
            <li class="nav-item"><a class="nav-link" href="/mail">Mail</a></li>
            <li class="nav-item"><a class="nav-link" href="/calendar">Calendar</a></li>
        """
    else:
        user_nav = '<li class="nav-item"><a class="nav-link" href="/auth/signin">Sign in</a></li>'
        links = ""

    alert_html = "".join(render_alert(a) for a in alerts or [])

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{_e(title)} - Graph Tutorial</title>
    <link rel="stylesheet" href="{BOOTSTRAP_CSS}">
</head>
<body>
    <nav class="navbar navbar-expand navbar-dark bg-dark mb-3">
        <div class="container">
            <a class="navbar-brand" href="/">Graph Tutorial</a>
            <ul class="navbar-nav me-auto">
                <li class="nav-item"><a class="nav-link" href="/">Home</a></li>
                {links}
            </ul>
            <ul class="navbar-nav">{user_nav}</ul>
        </div>
    </nav>
    <main class="container">
        {alert_html}
        {content}
    </main>
</body>
</html>
"""


def page_response(
    request: Request,
    title: str,
    content: str,
    account: dict[str, Any] | None = None,
    alert: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render a page, consuming any pending flash message."""
    alerts = []
    flash = read_flash(request)
    if flash:
        alerts.append(flash)
    if alert:
        alerts.append(alert)

    response = HTMLResponse(layout(title, content, account, alerts), status_code=status_code)
    clear_flash(request, response)
    return response


def home_content(account: dict[str, Any] | None) -> str:
    if not account:
        return """
        <div class="p-5 mb-4 bg-light rounded-3">
            <h1>Graph Tutorial</h1>
            <p class="lead">This sample app shows how to use the Microsoft Graph API
            to access a user's data from Python.</p>
            <a class="btn btn-primary btn-large" href="/auth/signin">Click here to sign in</a>
        </div>
        """
    return f"""
    <div class="p-5 mb-4 bg-light rounded-3">
        <h1>Graph Tutorial</h1>
        <h4>Welcome {_e(account.get("display_name"))}!</h4>
        <p>Signed in as {_e(account.get("email_address"))}.
        Time zone: {_e(account.get("time_zone"))}.</p>
        <p>Use the navigation bar at the top of the page to get started.</p>
    </div>
    """


def mail_content(model: MailViewModel, week_start_local: datetime | None = None) -> str:
    rows = "".join(
        f"""
            <tr>
                <td>{_e(m.sender)}</td>
                <td>{_e(m.from_address)}</td>
                <td>{_e(m.subject)}</td>
                <td>{_e(m.importance)}</td>
            </tr>"""
        for m in model.messages
    )
    week = ""
    if week_start_local is not None:
        week = f'<p class="text-muted">Week of {_e(week_start_local.strftime("%B %d, %Y"))}</p>'

    return f"""
    <h1>Mail</h1>
    {week}
    <table class="table">
        <thead>
            <tr>
                <th scope="col">Sender</th>
                <th scope="col">From</th>
                <th scope="col">Subject</th>
                <th scope="col">Importance</th>
            </tr>
        </thead>
        <tbody>{rows}
        </tbody>
    </table>
    """


def calendar_content(model: CalendarViewModel, week_start_local: datetime | None = None) -> str:
    rows = "".join(
        f"""
            <tr>
                <td>{_e(ev.organizer)}</td>
                <td>{_e(ev.subject)}</td>
                <td>{_e(_format_time(ev.start))}</td>
                <td>{_e(_format_time(ev.end))}</td>
            </tr>"""
        for ev in model.events
    )
    heading = "Calendar"
    if week_start_local is not None:
        heading = f"Calendar for week of {week_start_local.strftime('%B %d, %Y')}"

    return f"""
    <h1>{_e(heading)}</h1>
    <p class="text-muted">Times shown in {_e(model.time_zone)}</p>
    <a class="btn btn-light btn-sm mb-3" href="/calendar/new">New event</a>
    <table class="table">
        <thead>
            <tr>
                <th scope="col">Organizer</th>
                <th scope="col">Subject</th>
                <th scope="col">Start</th>
                <th scope="col">End</th>
            </tr>
        </thead>
        <tbody>{rows}
        </tbody>
    </table>
    """


def new_event_content(values: dict[str, Any] | None = None) -> str:
    values = values or {}
    return f"""
    <h1>New event</h1>
    <form method="post" action="/calendar/new">
        <div class="mb-3">
            <label class="form-label" for="subject">Subject</label>
            <input class="form-control" id="subject" name="subject" required
                   value="{_e(values.get("subject"))}">
        </div>
        <div class="mb-3">
            <label class="form-label" for="attendees">Attendees</label>
            <input class="form-control" id="attendees" name="attendees"
                   placeholder="Separate multiple email addresses with a semicolon (';')"
                   value="{_e(values.get("attendees"))}">
        </div>
        <div class="row mb-3">
            <div class="col">
                <label class="form-label" for="start">Start</label>
                <input class="form-control" type="datetime-local" id="start" name="start" required
                       value="{_e(values.get("start"))}">
            </div>
            <div class="col">
                <label class="form-label" for="end">End</label>
                <input class="form-control" type="datetime-local" id="end" name="end" required
                       value="{_e(values.get("end"))}">
            </div>
        </div>
        <div class="mb-3">
            <label class="form-label" for="body">Body</label>
            <textarea class="form-control" id="body" name="body" rows="3">{_e(values.get("body"))}</textarea>
        </div>
        <button class="btn btn-primary me-2" type="submit">Create</button>
        <a class="btn btn-secondary" href="/calendar">Cancel</a>
    </form>
    """

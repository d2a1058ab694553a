"""Mail/calendar providers

- base.py: MailCalendarProvider abstract interface
- microsoft_graph.py: Outlook mail and calendar via Microsoft Graph

Routes only talk to MailCalendarProvider, so tests can swap in a fake.
"""

from graph_tutorial.graph.providers.base import MailCalendarProvider

__all__ = ["MailCalendarProvider"]

"""Microsoft Graph integration: week window, time zones, models, OAuth and providers."""

# Microsoft Graph API endpoint
GRAPH_API_BASE = "https://graph.microsoft.com/v1.0"

# Permission scopes requested at sign-in
SCOPES = [
    "User.Read",
    "MailboxSettings.Read",
    "Mail.ReadBasic",
    "Files.Read",
    "Calendars.ReadWrite",
]

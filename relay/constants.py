"""
relay/constants.py

Table names, channel and API constants used by the relay.
Literal identifiers for external systems must be referenced from this module.
"""

# ── Supabase tables ──────────────────────────────────────────
SETTINGS_TABLE: str = "office_notification_settings"
OFFICE_TABLE: str = "gol"
OFFICE_NAME_COLUMN: str = "office_name"

# ── Realtime ─────────────────────────────────────────────────
BROADCAST_ALL_EVENTS: str = "*"

# ── Gmail ────────────────────────────────────────────────────
GMAIL_SEND_SCOPE: str = "https://www.googleapis.com/auth/gmail.send"
GMAIL_USER_ID: str = "me"

# ── Email content ────────────────────────────────────────────
BRAND_NAME: str = "Elite Sedation"
PROVIDER_PLACEHOLDER: str = "Not assigned"

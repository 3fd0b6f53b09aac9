"""
relay/dependencies.py

FastAPI dependency providers for the process-lifetime service handles
created in the application lifespan.
"""

from fastapi import Request

from relay.services.notification import NotificationProcessor


def get_processor(request: Request) -> NotificationProcessor:
    """Return the NotificationProcessor stored on app.state at startup."""
    return request.app.state.processor

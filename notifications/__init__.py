"""
Notification domain of the quote backend.

- NotificationGenerator: derives expiration notifications from accepted quotes
- EventBridge: runs the generator when quotes enter or leave the accepted status
- NotificationService: listings, summary and per-record operations for the API
- Backend: wires the bus, the collections and the services together
"""

from notifications.backend import Backend
from notifications.event_bridge import EventBridge
from notifications.generator import NotificationGenerator
from notifications.service import NotificationService

__all__ = [
    "Backend",
    "EventBridge",
    "NotificationGenerator",
    "NotificationService",
]

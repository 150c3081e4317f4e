"""
Shared infrastructure for the quote notification backend.

This package contains code used by every domain:
- Domain models (Quote, Keyword, Notification, PaginatedResponse)
- Repository contracts and the in-memory document store
- Settings and the error taxonomy
"""

from core.config import Settings, get_settings
from core.data_store import DataStore
from core.errors import AppError, BatchWriteError, NotFoundError, ValidationError
from core.models import (
    Keyword,
    Notification,
    NotificationDraft,
    NotificationSummary,
    PaginatedResponse,
    ProcessingResult,
    Quote,
    QuoteItem,
    QuoteStatus,
)
from core.store import KeywordDictionary, NotificationStore, QuoteRepository

__all__ = [
    "Settings",
    "get_settings",
    "DataStore",
    "AppError",
    "BatchWriteError",
    "NotFoundError",
    "ValidationError",
    "Keyword",
    "Notification",
    "NotificationDraft",
    "NotificationSummary",
    "PaginatedResponse",
    "ProcessingResult",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "KeywordDictionary",
    "NotificationStore",
    "QuoteRepository",
]

"""
Quote domain.

Only the lifecycle publisher lives here; quote CRUD is plain repository
plumbing and is not part of this backend's core.
"""

from quotes.service import QuoteService

__all__ = ["QuoteService"]

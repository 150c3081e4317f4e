"""
HTTP surface of the quote notification backend.

This package provides a single FastAPI application that exposes:
- Paginated notification listings, summary and counters
- Notification maintenance and generation triggers
- The quote status endpoint that drives generation through events
"""

from api.main import app

__all__ = ["app"]

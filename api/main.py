"""
FastAPI application for the quote notification backend.

This application provides:
1. Paginated notification listings (/api/notificacoes/.../paginado)
2. Dashboard summary and unread counter
3. Per-notification maintenance (mark as read, delete)
4. Manual generation and backfill triggers
5. A quote status endpoint that publishes the lifecycle event

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import Field

from core.config import get_settings
from core.errors import AppError
from core.models import (
    CamelModel,
    Notification,
    NotificationSummary,
    PaginatedResponse,
    ProcessingResult,
    Quote,
)
from notifications.backend import Backend
from notifications.generator import NotificationGenerator
from notifications.service import NotificationService
from quotes.service import QuoteService

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("notification_api")

PREFIX = "/api/notificacoes"


# Request/response models
class StatusChangeRequest(CamelModel):
    """New status for a quote."""
    status: str = Field(..., min_length=1)


class UnreadCount(CamelModel):
    quantidade: int


class MarkedCount(CamelModel):
    marcadas: int


# Module-level backend (replaced in tests through reset_api_state)
_backend: Optional[Backend] = None


def get_backend() -> Backend:
    """Get the backend instance."""
    global _backend
    if _backend is None:
        _backend = Backend()
    return _backend


def reset_api_state(backend: Optional[Backend] = None) -> None:
    """Reset API state (for testing)."""
    global _backend
    _backend = backend


def get_notification_service(backend: Backend = Depends(get_backend)) -> NotificationService:
    return backend.notification_service


def get_generator(backend: Backend = Depends(get_backend)) -> NotificationGenerator:
    return backend.generator


def get_quote_service(backend: Backend = Depends(get_backend)) -> QuoteService:
    return backend.quote_service


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    backend = get_backend()
    backend.start()
    logger.info("Starting Quote Notifications API")
    yield
    backend.stop()
    logger.info("Shutting down")


settings = get_settings()

app = FastAPI(
    title=settings.name,
    description="""
    Expiration notifications for accepted quotes.

    When a quote is accepted, every line item whose description contains a
    configured keyword gets a notification due a keyword-specific number of
    days later. Leaving the accepted status retracts them.

    ## Endpoints

    - `/api/notificacoes/*` - Listings, summary and maintenance
    - `/api/orcamentos/{id}/status` - Change a quote status (publishes the event)
    """,
    version=settings.version,
    lifespan=lifespan,
)


# =============================================================================
# Error handling
# =============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Expected errors carry their own status code."""
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected exceptions."""
    logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Erro interno do servidor"},
    )


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "quote-notifications", "version": settings.version}


# =============================================================================
# Summary and counters
# =============================================================================

@app.get(f"{PREFIX}/resumo", response_model=NotificationSummary, tags=["Notificações"])
async def obtain_summary(service: NotificationService = Depends(get_notification_service)):
    """Total, unread, overdue, upcoming and active counts."""
    return await service.obtain_summary()


@app.get(f"{PREFIX}/nao-lidas/count", response_model=UnreadCount, tags=["Notificações"])
async def count_unread(service: NotificationService = Depends(get_notification_service)):
    return UnreadCount(quantidade=await service.count_unread())


# =============================================================================
# Paginated listings
# =============================================================================

@app.get(f"{PREFIX}/paginado", response_model=PaginatedResponse[Notification], tags=["Notificações"])
async def list_all(
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    cursor: Optional[str] = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
):
    """All notifications, earliest due date first."""
    return await service.list_all(page_size, cursor)


@app.get(f"{PREFIX}/nao-lidas/paginado", response_model=PaginatedResponse[Notification], tags=["Notificações"])
async def list_unread(
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    cursor: Optional[str] = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
):
    """Unread notifications."""
    return await service.list_unread(page_size, cursor)


@app.get(f"{PREFIX}/vencidas/paginado", response_model=PaginatedResponse[Notification], tags=["Notificações"])
async def list_overdue(
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    cursor: Optional[str] = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
):
    """Notifications due before today, read or not."""
    return await service.list_overdue(page_size, cursor)


@app.get(f"{PREFIX}/ativas/paginado", response_model=PaginatedResponse[Notification], tags=["Notificações"])
async def list_active(
    dias: Optional[int] = Query(default=None),
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    cursor: Optional[str] = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
):
    """Unread notifications due (or overdue) within the next ``dias`` days (default 60)."""
    return await service.list_active(dias, page_size, cursor)


@app.get(f"{PREFIX}/proximas/paginado", response_model=PaginatedResponse[Notification], tags=["Notificações"])
async def list_upcoming(
    dias: Optional[int] = Query(default=None),
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    cursor: Optional[str] = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
):
    """Notifications due between now and ``dias`` days ahead (default 30)."""
    return await service.list_upcoming(dias, page_size, cursor)


# =============================================================================
# Maintenance
# =============================================================================

@app.patch(f"{PREFIX}/marcar-todas-lidas", response_model=MarkedCount, tags=["Notificações"])
async def mark_all_as_read(service: NotificationService = Depends(get_notification_service)):
    return MarkedCount(marcadas=await service.mark_all_as_read())


@app.get(f"{PREFIX}/{{notification_id}}", response_model=Notification, tags=["Notificações"])
async def get_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return await service.get_by_id(notification_id)


@app.patch(f"{PREFIX}/{{notification_id}}/lida", response_model=Notification, tags=["Notificações"])
async def mark_as_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return await service.mark_as_read(notification_id)


@app.delete(f"{PREFIX}/{{notification_id}}", status_code=204, tags=["Notificações"])
async def delete_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    await service.delete(notification_id)
    return Response(status_code=204)


# =============================================================================
# Generation
# =============================================================================

@app.post(f"{PREFIX}/gerar/{{orcamento_id}}", response_model=list[Notification], tags=["Geração"])
async def generate_for_quote(
    orcamento_id: str,
    generator: NotificationGenerator = Depends(get_generator),
):
    """
    Generate the missing notifications of one quote.

    Returns only the notifications created by this call; quotes that are not
    accepted yield an empty list.
    """
    return await generator.generate_for_quote(orcamento_id)


@app.post(f"{PREFIX}/processar-todos", response_model=ProcessingResult, tags=["Geração"])
async def process_all_accepted(generator: NotificationGenerator = Depends(get_generator)):
    """Backfill over every accepted quote."""
    return await generator.process_all_accepted()


# =============================================================================
# Quote lifecycle
# =============================================================================

@app.patch("/api/orcamentos/{quote_id}/status", response_model=Quote, tags=["Orçamentos"])
async def change_quote_status(
    quote_id: str,
    request: StatusChangeRequest,
    quote_service: QuoteService = Depends(get_quote_service),
):
    """
    Change a quote status.

    Publishes QuoteStatusChanged; moving into or out of the accepted status
    generates or retracts the quote's notifications before this returns.
    """
    return await quote_service.change_status(quote_id, request.status)

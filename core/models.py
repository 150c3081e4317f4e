"""
Domain models for the quote notification backend.

Design decisions:
- Using Pydantic for validation and serialization
- Python attributes are snake_case; the persisted/wire names are camelCase
  (``orcamentoId``, ``dataVencimento``...) through an alias generator, so
  ``model_dump(by_alias=True)`` yields the stored document shape
- All datetimes are naive UTC; aware values are converted on the way in
- Quote status is kept as a plain string: the notification core only asks
  "is it accepted?", it does not own the quote state machine
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """Base model serializing to camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


# =============================================================================
# Quotes (owned by the quote domain, read-only here)
# =============================================================================

class QuoteStatus(str, Enum):
    """Known quote lifecycle states."""
    ABERTO = "aberto"         # Open, waiting for the client
    ACEITO = "aceito"         # Accepted by the client
    RECUSADO = "recusado"     # Refused by the client
    EXPIRADO = "expirado"     # Validity date passed while open


class QuoteItem(CamelModel):
    """A single line item of a quote."""
    descricao: str = Field(default="", description="Free-text item description")
    unidade: Optional[str] = Field(default=None)
    quantidade: float = Field(default=1, ge=0)
    valor_total: float = Field(default=0, ge=0)


class Quote(CamelModel):
    """
    Quote (orçamento) as seen by the notification core.

    Only the identity, status, dates, client fields and item descriptions
    are consumed when generating notifications.
    """
    id: str = Field(..., description="Unique quote identifier")
    numero: int = Field(..., description="Sequential quote number")
    status: str = Field(default=QuoteStatus.ABERTO.value, description="Lifecycle status")
    cliente_id: str = Field(..., description="Reference to client")
    cliente_nome: str = Field(..., description="Client display name")
    data_emissao: Optional[datetime] = Field(default=None)
    data_validade: Optional[datetime] = Field(default=None)
    data_aceite: Optional[datetime] = Field(default=None)
    itens: list[QuoteItem] = Field(default_factory=list)
    valor_total: float = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = Field(default=None)

    normalize_dates = field_validator(
        "data_emissao", "data_validade", "data_aceite", "created_at", "updated_at"
    )(_to_naive_utc)

    def item_descriptions(self) -> list[str]:
        """Descriptions of the items that have one, in item order."""
        return [item.descricao for item in self.itens if item.descricao]

    def anchor_date(self) -> datetime:
        """Date expiry windows are counted from: acceptance, then emission, then now."""
        return self.data_aceite or self.data_emissao or utcnow()


# =============================================================================
# Keywords
# =============================================================================

class Keyword(CamelModel):
    """
    Configured term (palavra-chave) with its expiry window.

    Terms are stored lower-case; matching against item descriptions is a
    case-insensitive substring test.
    """
    id: str = Field(..., description="Unique keyword identifier")
    palavra: str = Field(..., min_length=1, description="Matching term")
    prazo_dias: int = Field(..., ge=1, le=3650, description="Expiry window in days")
    ativo: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("palavra", mode="before")
    @classmethod
    def lowercase_term(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def matches(self, description: str) -> bool:
        """True if this keyword occurs anywhere inside ``description``."""
        return self.palavra in description.lower()


# =============================================================================
# Notifications
# =============================================================================

class NotificationDraft(CamelModel):
    """A notification staged for creation (no id or timestamp yet)."""
    orcamento_id: str
    orcamento_numero: int
    orcamento_data_emissao: Optional[datetime] = None
    cliente_id: str
    cliente_nome: str
    item_descricao: str
    palavra_chave: str
    data_vencimento: datetime
    lida: bool = False

    normalize_dates = field_validator(
        "orcamento_data_emissao", "data_vencimento"
    )(_to_naive_utc)

    @property
    def key(self) -> tuple[str, str, str]:
        """Idempotence key: (quote, item description, keyword)."""
        return (self.orcamento_id, self.item_descricao, self.palavra_chave)


class Notification(NotificationDraft):
    """
    Persisted expiration notification.

    Quote and client fields are denormalized at generation time and are
    never re-synced with the quote afterwards.
    """
    id: str
    created_at: datetime

    normalize_created = field_validator("created_at")(_to_naive_utc)


T = TypeVar("T")


class PaginatedResponse(CamelModel, Generic[T]):
    """
    One page of an ordered scan.

    ``total`` is counted independently of the page and may disagree with
    the items under concurrent writes. ``cursor`` is set iff ``has_more``.
    """
    items: list[T] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    cursor: Optional[str] = None


class NotificationSummary(CamelModel):
    """Cardinalities shown on the dashboard header."""
    total: int
    nao_lidas: int
    vencidas: int
    proximas_vencer: int
    ativas: int


class ProcessingResult(CamelModel):
    """Outcome of a backfill over every accepted quote."""
    processados: int = 0
    notificacoes_criadas: int = 0

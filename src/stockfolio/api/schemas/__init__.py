"""API request/response schemas."""

from stockfolio.api.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountListResponse,
)
from stockfolio.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from stockfolio.api.schemas.portfolio import (
    PositionResponse,
    SummaryResponse,
    AllocationItemResponse,
    HistoricalPointResponse,
    SnapshotResponse,
    RefreshResponse,
    QuoteResponse,
    MarketStatusResponse,
)
from stockfolio.api.schemas.backup import ImportPreviewResponse, ImportCancelResponse
from stockfolio.api.schemas.assistant import AskRequest, AskResponse

__all__ = [
    "AccountCreate",
    "AccountUpdate",
    "AccountResponse",
    "AccountListResponse",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "PositionResponse",
    "SummaryResponse",
    "AllocationItemResponse",
    "HistoricalPointResponse",
    "SnapshotResponse",
    "RefreshResponse",
    "QuoteResponse",
    "MarketStatusResponse",
    "ImportPreviewResponse",
    "ImportCancelResponse",
    "AskRequest",
    "AskResponse",
]

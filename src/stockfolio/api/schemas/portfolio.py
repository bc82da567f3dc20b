"""Pydantic schemas for portfolio and market endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from stockfolio.api.schemas.account import AccountResponse


class PositionResponse(BaseModel):
    """Single position with mark-to-market metrics."""

    ticker: str
    company_name: str
    shares: float
    average_cost: float
    current_price: float
    market_value: float
    cost_basis: float
    gain_loss: float
    gain_loss_percent: float
    volume: Optional[float] = None
    day_high: Optional[float] = None
    day_low: Optional[float] = None
    previous_close: Optional[float] = None


class SummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_market_value: float
    total_cost_basis: float
    total_gain_loss: float
    total_gain_loss_percent: float
    trading_cash: float


class AllocationItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    ticker: str
    market_value: float
    percentage: float


class HistoricalPointResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: str
    value: float


class SnapshotResponse(BaseModel):
    """Everything needed to render the active account."""

    account: AccountResponse
    positions: list[PositionResponse]
    summary: SummaryResponse
    allocation: list[AllocationItemResponse]
    history: list[HistoricalPointResponse]
    is_mock: bool
    as_of: Optional[datetime] = None


class RefreshResponse(BaseModel):
    refreshed: bool
    is_mock: bool
    as_of: Optional[datetime] = None


class QuoteResponse(BaseModel):
    """Market quote."""

    model_config = {"from_attributes": True}

    ticker: str
    company_name: str
    price: float
    volume: float
    day_high: float
    day_low: float
    previous_close: float
    is_mock: bool


class MarketStatusResponse(BaseModel):
    is_mock: bool
    last_refreshed_at: Optional[datetime] = None

"""Pydantic schemas for transaction endpoints."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from stockfolio.domain.models.enums import TransactionType


class TransactionCreateRequest(BaseModel):
    """Request schema for recording a transaction in the active account."""

    ticker: str = Field(..., min_length=1, max_length=20, description="Ticker symbol")
    type: TransactionType = Field(..., description="BUY or SELL")
    shares: float = Field(..., gt=0, description="Number of shares")
    price: float = Field(..., ge=0, description="Price per share")
    date: dt.date = Field(..., description="Trade date (YYYY-MM-DD)")
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("ticker")
    @classmethod
    def uppercase_ticker(cls, v: str) -> str:
        return v.strip().upper()


class TransactionUpdateRequest(BaseModel):
    """Request schema for editing a transaction (partial update)."""

    ticker: Optional[str] = Field(default=None, min_length=1, max_length=20)
    type: Optional[TransactionType] = None
    shares: Optional[float] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    id: str
    ticker: str
    company_name: str
    type: TransactionType
    shares: float
    price: float
    date: dt.date
    notes: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response schema for the active ledger."""

    account_id: str
    transactions: list[TransactionResponse]
    count: int

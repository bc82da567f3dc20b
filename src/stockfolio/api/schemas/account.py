"""Pydantic schemas for account endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request schema for creating an account."""

    name: str = Field(..., min_length=1, max_length=255, description="Account name")
    cash: float = Field(default=0.0, description="Opening trading cash")


class AccountUpdate(BaseModel):
    """Request schema for renaming an account or overwriting its cash."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    cash: Optional[float] = None


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    model_config = {"from_attributes": True}

    id: str
    name: str
    cash: float
    is_active: bool = False


class AccountListResponse(BaseModel):
    """Response schema for listing accounts."""

    accounts: list[AccountResponse]
    active_account_id: Optional[str] = None
    count: int

"""Pydantic schemas for backup endpoints."""

from pydantic import BaseModel


class ImportPreviewResponse(BaseModel):
    """What confirming a staged import would replace."""

    model_config = {"from_attributes": True}

    kind: str
    description: str
    transaction_count: int
    account_count: int


class ImportCancelResponse(BaseModel):
    cancelled: bool

"""Pydantic schemas for the coin ledger."""
from datetime import datetime

from pydantic import BaseModel, Field

from tabletrek.schemas.profile import ProfileOutSchema


class SpendCoinsSchema(BaseModel):
    amount: int = Field(gt=0)
    description: str = Field(min_length=1, max_length=255)


class CoinTransactionOutSchema(BaseModel):
    id: int
    user_id: int
    amount: int
    type: str
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class SpendCoinsOutSchema(BaseModel):
    transaction: CoinTransactionOutSchema
    profile: ProfileOutSchema

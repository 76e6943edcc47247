"""Pydantic schemas for the ingestion domain."""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TransactionOut(BaseModel):
    """A parsed, classified transaction ready for display or insert."""

    fit_id: str
    date: dt.date
    amount: float = Field(ge=0)
    description: str
    direction: Literal["credit", "debit"]
    bank_name: str = ""
    account_number: str = ""
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_type: Optional[str] = None


class CategoryTotalOut(BaseModel):
    name: str
    type: str = ""
    direction: Literal["credit", "debit"]
    total: float
    count: int


class SummaryOut(BaseModel):
    total_credits: float = 0.0
    total_debits: float = 0.0
    balance: float = 0.0
    transaction_count: int = 0
    by_category: list[CategoryTotalOut] = Field(default_factory=list)


class ImportResponse(BaseModel):
    """Response from OFX statement import."""

    bank_name: str = ""
    account_number: str = ""
    period_start: Optional[dt.date] = None
    period_end: Optional[dt.date] = None
    transactions: list[TransactionOut]
    count: int
    skipped: int = 0
    summary: SummaryOut

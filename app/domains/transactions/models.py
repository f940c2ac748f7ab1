# app/domains/transactions/models.py

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, field_validator


class Transaction(BaseModel):
    id: int
    title: str
    description: str
    price: float
    category: str
    image: str
    sold: bool
    dateOfSale: datetime

    @field_validator("dateOfSale")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        # MongoDB stores naive UTC datetimes
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TransactionPage(BaseModel):
    total: int
    transactions: List[Dict[str, Any]]


class Statistics(BaseModel):
    total_sale_amount: float
    total_sold_items: int
    total_not_sold_items: int


class PriceRangeCount(BaseModel):
    price_range: str
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class CombinedData(BaseModel):
    transactions: TransactionPage
    statistics: Statistics
    barChart: List[PriceRangeCount]
    pieChart: List[CategoryCount]

# app/schemas/transaction.py
import datetime as dt
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.transaction import MAX_AMOUNT, TransactionType
from app.schemas.common import CamelModel, date_only, one_year_from, reject_bool, reject_null


class TransactionCreate(CamelModel):
    type: TransactionType
    category: Optional[str] = Field(default=None, max_length=50)
    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, max_length=500, description="E.g. Lunch at cafe")
    date: dt.date = Field(..., description="ISO 8601 date of the transaction")
    source: Optional[str] = Field(default=None, max_length=100)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_numeric(cls, value):
        return reject_bool(value)

    @field_validator("date", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        return date_only(value)

    @field_validator("category", "source")
    @classmethod
    def blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("date")
    @classmethod
    def not_too_far_ahead(cls, value: dt.date) -> dt.date:
        if value > one_year_from(dt.date.today()):
            raise ValueError("Date cannot be more than 1 year in the future")
        return value


class TransactionUpdate(CamelModel):
    # type is fixed at creation and deliberately absent here
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    amount: Optional[float] = Field(default=None, gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, max_length=500)
    date: Optional[dt.date] = None
    source: Optional[str] = Field(default=None, max_length=100)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_numeric(cls, value):
        return reject_bool(value)

    @field_validator("date", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        return date_only(value)

    @field_validator("category", "amount", "date")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class TransactionRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: TransactionType
    category: str
    amount: float
    description: str = ""
    date: dt.date
    source: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_empty(cls, value):
        return value or ""


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TransactionPage(BaseModel):
    data: List[TransactionRead]
    pagination: Pagination


class CategorySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: TransactionType
    category: str
    total: float
    count: int
    average: float


class TransactionSummary(BaseModel):
    data: List[CategorySummary]


class CategorySuggestionRead(BaseModel):
    category: str
    confidence: float = Field(..., ge=0, le=1)

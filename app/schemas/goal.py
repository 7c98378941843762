# app/schemas/goal.py
import datetime as dt
from typing import Any, Dict, Optional
from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from app.models.transaction import MAX_AMOUNT
from app.schemas.common import CamelModel, date_only, reject_bool, reject_null

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _current_within_target(value: Optional[float], info: ValidationInfo) -> Optional[float]:
    target = info.data.get("target_amount")
    if value is not None and target is not None and value > target:
        raise ValueError("Current amount cannot exceed target amount")
    return value


class GoalCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    current_amount: float = Field(default=0.0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    deadline: dt.date
    color: str = Field(..., pattern=HEX_COLOR_PATTERN, description="Hex color code, e.g. #10b981")
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def amounts_are_numeric(cls, value):
        return reject_bool(value)

    @field_validator("deadline", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        return date_only(value)

    @field_validator("current_amount")
    @classmethod
    def within_target(cls, value, info: ValidationInfo):
        return _current_within_target(value, info)

    @field_validator("deadline")
    @classmethod
    def not_in_past(cls, value: dt.date) -> dt.date:
        if value < dt.date.today():
            raise ValueError("Deadline cannot be in the past")
        return value


class GoalUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    target_amount: Optional[float] = Field(default=None, gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    current_amount: Optional[float] = Field(default=None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    deadline: Optional[dt.date] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def amounts_are_numeric(cls, value):
        return reject_bool(value)

    @field_validator("deadline", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        return date_only(value)

    @field_validator("name", "target_amount", "current_amount", "deadline", "color")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    @field_validator("current_amount")
    @classmethod
    def within_target(cls, value, info: ValidationInfo):
        return _current_within_target(value, info)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class GoalRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    target_amount: float
    current_amount: float
    deadline: dt.date
    color: str
    notes: str = ""
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator("notes", mode="before")
    @classmethod
    def null_notes_is_empty(cls, value):
        return value or ""

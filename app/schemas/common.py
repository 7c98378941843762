# app/schemas/common.py
import datetime as dt
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def one_year_from(day: dt.date) -> dt.date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # Feb 29th
        return day.replace(year=day.year + 1, day=28)


def reject_null(value):
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def reject_bool(value):
    # bool is an int subclass; lax float parsing would store true as 1.0
    if isinstance(value, bool):
        raise ValueError("Value must be a number")
    return value


def date_only(value):
    """Accept a full ISO 8601 timestamp for a date field and keep its calendar date."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str


class FieldError(BaseModel):
    field: Optional[str] = None
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    details: List[FieldError]

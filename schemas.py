"""Pydantic schemas for MemoryKeeper.

This module defines the Record entity plus request and response schemas.

Records keep the JSON shape used by the browser storage of earlier versions
(``name``, ``date``, ``type``, ``notes``, ``isLunar``) through field aliases,
so persisted data and API payloads share one format. Python code uses the
field names (``title``, ``origin_date``, ``category`` ...).
"""

import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


ALL_CATEGORIES = "ALL"
"""Type filter value that matches every category"""


class Category(str, enum.Enum):
    """Fixed set of record kinds"""
    BIRTHDAY = "BIRTHDAY"
    ANNIVERSARY = "ANNIVERSARY"
    OTHER = "OTHER"


class Record(BaseModel):
    """A recurring personal date.

    Immutable: edits produce a new Record with the same id.
    """

    id: str = Field(..., min_length=1, description="Opaque unique identifier")

    title: str = Field(
        ...,
        alias="name",
        min_length=1,
        description="Display title",
        examples=["妈妈生日"]
    )

    # Month/day recur yearly; the year anchors elapsed-year counts
    origin_date: date = Field(
        ...,
        alias="date",
        description="Origin date (YYYY-MM-DD)",
        examples=["1975-05-20"]
    )

    category: Category = Field(
        Category.BIRTHDAY,
        alias="type",
        description="BIRTHDAY, ANNIVERSARY or OTHER"
    )

    notes: Optional[str] = Field(None, description="Optional free text")

    is_lunar: Optional[bool] = Field(
        None,
        alias="isLunar",
        description="Reserved. Recurrence is always computed on the solar calendar"
    )

    class Config:
        """Pydantic configuration"""
        frozen = True
        populate_by_name = True


class RecordCreate(BaseModel):
    """Schema for creating a new record.

    Empty titles and missing or malformed dates are rejected here,
    before anything reaches the record set.
    """

    title: str = Field(..., alias="name", min_length=1, max_length=200)
    origin_date: date = Field(..., alias="date")
    category: Category = Field(Category.BIRTHDAY, alias="type")
    notes: Optional[str] = Field(None)
    is_lunar: Optional[bool] = Field(None, alias="isLunar")

    class Config:
        """Pydantic configuration"""
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "妈妈生日",
                "date": "1975-05-20",
                "type": "BIRTHDAY",
                "notes": "喜欢花"
            }
        }


class RecordUpdate(BaseModel):
    """Schema for editing an existing record.

    All fields are optional - only provided fields will be updated.
    """

    title: Optional[str] = Field(None, alias="name", min_length=1, max_length=200)
    origin_date: Optional[date] = Field(None, alias="date")
    category: Optional[Category] = Field(None, alias="type")
    notes: Optional[str] = Field(None)
    is_lunar: Optional[bool] = Field(None, alias="isLunar")

    class Config:
        """Pydantic configuration"""
        populate_by_name = True


class RecordView(BaseModel):
    """A record as shown in the urgency-ordered list.

    Derived values are computed against a fixed "today".
    """

    id: str
    title: str = Field(..., alias="name")
    origin_date: date = Field(..., alias="date")
    category: Category = Field(..., alias="type")
    notes: Optional[str] = None
    is_lunar: Optional[bool] = Field(None, alias="isLunar")

    days_until: int = Field(..., description="Days until the next occurrence (0 = today)")
    next_occurrence: date = Field(..., description="Date of the next occurrence")
    elapsed_years: int = Field(..., description="Current year minus origin year")
    month_day: str = Field(..., description="Recurring date label, e.g. 05月20日")
    category_label: str = Field(..., description="Localized category name")
    age_caption: str = Field("", description="e.g. 49岁 or 3周年")
    is_urgent: bool = Field(False, description="Due within the urgent threshold")

    class Config:
        """Pydantic configuration"""
        populate_by_name = True


class WishResult(BaseModel):
    """Outcome of a greeting generation request.

    ``is_fallback`` is True when ``text`` is one of the fixed fallback
    messages rather than generated content.
    """

    text: str
    is_fallback: bool = False

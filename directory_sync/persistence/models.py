"""
SQLModel tables for the directory data produced by ingestion.

Tables:
- companies: one row per distinct company name
- events: one row per distinct (title, start_date) pair
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time as naive UTC (the storage convention for all timestamps)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SourceType(str, Enum):
    SCRAPED = "scraped"
    EXTRACTED = "extracted"


class Company(SQLModel, table=True):
    """A business listed in the directory."""
    __tablename__ = "companies"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    description: Optional[str] = None
    website: Optional[str] = None
    industry: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    size: Optional[int] = None  # employee count
    founded: Optional[int] = None  # year

    # Location
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    # Metadata
    logo_url: Optional[str] = None
    source_url: Optional[str] = None
    source_type: str = Field(default=SourceType.EXTRACTED.value)
    is_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Event(SQLModel, table=True):
    """A dated event listed in the directory."""
    __tablename__ = "events"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    description: Optional[str] = None
    start_date: datetime = Field(index=True)
    end_date: Optional[datetime] = None

    # Location
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    is_virtual: bool = Field(default=False)

    event_url: Optional[str] = None
    industry: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    organizer_name: Optional[str] = None
    organizer_website: Optional[str] = None

    # Metadata
    logo_url: Optional[str] = None
    source_url: Optional[str] = None
    source_type: str = Field(default=SourceType.EXTRACTED.value)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

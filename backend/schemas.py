from datetime import datetime
from enum import Enum

from pydantic import BaseModel
from sqlmodel import SQLModel


class OutcomeKind(str, Enum):
    CREATED = "created"
    FUTURE_DATE = "future_date"
    DUPLICATE_DATE = "duplicate_date"
    INVALID_DATE = "invalid_date"
    INVALID_TIMEZONE = "invalid_timezone"
    FAILED = "failed"


class SubmissionOutcome(BaseModel):
    """Result of a journal entry submission."""

    kind: OutcomeKind
    entry_date: str | None = None
    entry_id: int | None = None
    message: str | None = None

    @classmethod
    def created(cls, entry_date: str, entry_id: int) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.CREATED, entry_date=entry_date, entry_id=entry_id)

    @classmethod
    def future_date(cls, entry_date: str) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.FUTURE_DATE, entry_date=entry_date)

    @classmethod
    def duplicate_date(cls, entry_date: str) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.DUPLICATE_DATE, entry_date=entry_date)

    @classmethod
    def invalid_date(cls, entry_date: str, message: str) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.INVALID_DATE, entry_date=entry_date, message=message)

    @classmethod
    def invalid_timezone(cls, message: str) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.INVALID_TIMEZONE, message=message)

    @classmethod
    def failed(cls, message: str = "An error occurred. Please try again.") -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.FAILED, message=message)


class AstronomyLookup(BaseModel):
    """Outcome of an APOD lookup: either a url or the reason there is none."""

    date: str
    url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None


class EntryView(SQLModel):
    id: int
    title: str
    body: str
    date: str
    created_at: datetime
    include_astronomy: bool
    astronomy_image: str | None = None

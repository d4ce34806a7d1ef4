from datetime import UTC, datetime

from sqlmodel import Field, SQLModel, UniqueConstraint


class JournalEntry(SQLModel, table=True):
    __tablename__ = "journal_entries"
    __table_args__ = (UniqueConstraint("date", name="uniq_journal_entries_date"),)

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(default="")
    body: str = Field(default="")
    date: str  # YYYY-MM-DD format, one entry per calendar day
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    include_astronomy: bool = Field(default=False)
    astronomy_image: str | None = Field(default=None)  # APOD url, only when the lookup succeeded

"""Validation and normalization of journal entry submissions."""
import logging
import re
from datetime import UTC, date, datetime, timedelta

from astronomy import ApodClient
from db import DuplicateEntryError, EntryStore
from models import JournalEntry
from schemas import SubmissionOutcome

logger = logging.getLogger(__name__)

ENTRY_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Offsets follow getTimezoneOffset(): minutes local time is behind UTC.
# UTC+14 is -840, UTC-12 is +720.
MIN_TIMEZONE_OFFSET = -840
MAX_TIMEZONE_OFFSET = 720


class InvalidSubmission(ValueError):
    pass


def parse_entry_date(raw: str) -> date:
    """Parse a YYYY-MM-DD string into a date, rejecting impossible days."""
    if raw is None or not ENTRY_DATE_PATTERN.match(raw):
        raise InvalidSubmission(f"Entry date must be in YYYY-MM-DD format, got {raw!r}")
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidSubmission(f"{raw} is not a valid calendar date") from e


def parse_timezone_offset(raw: str | int | None) -> int:
    if raw is None or raw == "":
        return 0
    try:
        offset = int(raw)
    except (TypeError, ValueError) as e:
        raise InvalidSubmission(f"Timezone offset must be a whole number of minutes, got {raw!r}") from e
    if not MIN_TIMEZONE_OFFSET <= offset <= MAX_TIMEZONE_OFFSET:
        raise InvalidSubmission(
            f"Timezone offset {offset} is outside {MIN_TIMEZONE_OFFSET}..{MAX_TIMEZONE_OFFSET} minutes"
        )
    return offset


def user_selected_instant(entry_date: date, offset_minutes: int) -> datetime:
    """Midnight UTC of the chosen day shifted by the submitter's offset."""
    midnight = datetime(entry_date.year, entry_date.month, entry_date.day, tzinfo=UTC)
    return midnight - timedelta(minutes=offset_minutes)


def user_today(now: datetime, offset_minutes: int) -> date:
    """The submitter's current local calendar day."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local = now.astimezone(UTC) - timedelta(minutes=offset_minutes)
    return local.date()


def is_future_date(entry_date: date, offset_minutes: int, now: datetime) -> bool:
    return entry_date > user_today(now, offset_minutes)


def submit_entry(
    store: EntryStore,
    astronomy: ApodClient | None,
    *,
    title: str,
    body: str,
    entry_date: str,
    include_astronomy=False,
    timezone: str | int | None = 0,
    now: datetime | None = None,
) -> SubmissionOutcome:
    """Validate a submission and store it when it is accepted.

    Rejections come back as outcomes rather than exceptions. Anything
    unexpected is logged and reported as a generic failure.
    """
    try:
        offset = parse_timezone_offset(timezone)
    except InvalidSubmission as e:
        logger.info(f"Rejected submission for {entry_date}: {e}")
        return SubmissionOutcome.invalid_timezone(str(e))

    try:
        selected_date = parse_entry_date(entry_date)
    except InvalidSubmission as e:
        logger.info(f"Rejected submission: {e}")
        return SubmissionOutcome.invalid_date(entry_date, str(e))

    now = now or datetime.now(UTC)

    try:
        if is_future_date(selected_date, offset, now):
            logger.info(f"Rejected future entry date {entry_date} (offset {offset})")
            return SubmissionOutcome.future_date(entry_date)

        if store.find_by_date(entry_date):
            logger.info(f"Rejected duplicate entry date {entry_date}")
            return SubmissionOutcome.duplicate_date(entry_date)

        astronomy_image = None
        if include_astronomy and astronomy is not None:
            lookup = astronomy.lookup(entry_date)
            if lookup.ok:
                astronomy_image = lookup.url

        entry = store.insert(
            JournalEntry(
                title=title,
                body=body,
                date=entry_date,
                created_at=user_selected_instant(selected_date, offset),
                include_astronomy=bool(include_astronomy),
                astronomy_image=astronomy_image,
            )
        )
    except DuplicateEntryError:
        logger.info(f"Entry for {entry_date} was created concurrently")
        return SubmissionOutcome.duplicate_date(entry_date)
    except Exception:
        logger.exception(f"Error submitting entry for {entry_date}")
        return SubmissionOutcome.failed()

    logger.info(f"Created entry {entry.id} for {entry_date}")
    return SubmissionOutcome.created(entry_date, entry.id)

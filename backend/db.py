import logging
import os

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine, select

from models import JournalEntry

logger = logging.getLogger(__name__)


class DuplicateEntryError(Exception):
    """Raised when an insert collides with an existing entry for the same date."""


def resolve_database_url() -> str:
    """Work out the database URL from the environment.

    Falls back to a local SQLite file in development only.
    """
    db_path = os.getenv("DATABASE_PATH", "./journal.db")
    env = os.getenv("ENV", os.getenv("RENDER", "").lower() or "dev")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        # Guard against SQLite fallback in production
        if env in ("prod", "production") or os.getenv("RENDER"):
            raise RuntimeError(
                "DATABASE_URL missing in production; refusing to start with SQLite. "
                "Please configure DATABASE_URL environment variable."
            )
        database_url = f"sqlite:///{db_path}"

    # Render hands out postgres:// but SQLAlchemy needs postgresql://
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    return database_url


class EntryStore:
    """Journal entry persistence backed by a SQLModel engine.

    The engine is created up front, tables are created by ``open()`` and the
    connection pool is released by ``close()``.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            # Sessions are used from FastAPI's threadpool
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, echo=False, connect_args=connect_args)

        db_driver = database_url.split(":", 1)[0] if ":" in database_url else "unknown"
        logger.info(f"DB_URL_DRIVER={db_driver}")

    def open(self):
        """Create tables if they don't exist. Safe to call multiple times."""
        SQLModel.metadata.create_all(self.engine)

    def close(self):
        self.engine.dispose()

    def find_by_date(self, date: str) -> JournalEntry | None:
        with Session(self.engine) as session:
            return session.exec(select(JournalEntry).where(JournalEntry.date == date)).first()

    def insert(self, entry: JournalEntry) -> JournalEntry:
        """Insert a new entry and return it with its id assigned."""
        with Session(self.engine) as session:
            try:
                session.add(entry)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateEntryError(f"An entry for {entry.date} already exists") from e
            except Exception:
                session.rollback()
                raise
            session.refresh(entry)
            return entry

    def list_entries(self) -> list[JournalEntry]:
        """All entries, newest first."""
        with Session(self.engine) as session:
            stmt = select(JournalEntry).order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            return list(session.exec(stmt).all())

    def get(self, entry_id: int) -> JournalEntry | None:
        with Session(self.engine) as session:
            return session.get(JournalEntry, entry_id)

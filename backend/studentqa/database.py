import logging
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import create_engine, event, Engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from studentqa.config import settings
from studentqa.exceptions import DatabaseException

if TYPE_CHECKING:
    from studentqa.schemas.question import QuestionResponse

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, echo: bool = False, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    Every SQLite connection has foreign key enforcement switched on.
    Nothing is touched on disk until the first connection.
    """
    url = make_url(database_url)
    if url.get_backend_name() == 'sqlite':
        db_engine = create_engine(url, echo=echo, **kwargs)
        event.listen(db_engine, 'connect', _enable_sqlite_foreign_keys)
    else:
        db_engine = create_engine(
            url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=5,
            max_overflow=10,
            echo=echo,
            **kwargs
        )
    return db_engine


try:
    engine: Engine = create_db_engine(settings.database_url, echo=settings.database_echo)
    logger.debug("Database engine created")
except Exception as e:
    logger.critical(f"Failed to create database engine: {e}", exc_info=True)
    raise

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Declarative base for all models
Base = declarative_base()


def ensure_database_directory(bind: Optional[Engine] = None) -> None:
    """Create the parent directory of a SQLite database file if it is missing."""
    url = (bind or engine).url
    if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Rows are never dropped, so repeated runs keep accumulating answers.
    """
    import studentqa.models  # noqa: F401  (registers tables on Base.metadata)

    ensure_database_directory(bind)
    Base.metadata.create_all(bind=bind or engine)


class DatabaseHelper:
    """
    Scoped database handle with an explicit connect/close lifecycle.

    Each caller opens its own helper, calls ``connect_to_database()``, works
    through ``session`` and finally calls ``close_connection()``. The helper
    can also be used as a context manager.
    """

    def __init__(
        self,
        bind: Optional[Engine] = None,
        connect_attempts: Optional[int] = None
    ):
        self._session_factory = (
            sessionmaker(autocommit=False, autoflush=False, bind=bind)
            if bind is not None else SessionLocal
        )
        self.connect_attempts = connect_attempts or settings.db_connect_attempts
        self._session: Optional[Session] = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise DatabaseException("Database connection is not open")
        return self._session

    def connect_to_database(self) -> None:
        """
        Open a session and verify the database answers.

        Raises:
            DatabaseException: If the database cannot be reached after retries
        """
        if self._session is not None:
            return

        session = self._session_factory()
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self.connect_attempts),
                wait=wait_exponential(multiplier=1, min=2, max=10),
                retry=retry_if_exception_type(OperationalError),
                reraise=True
            ):
                with attempt:
                    session.execute(text('SELECT 1'))
        except SQLAlchemyError as e:
            session.close()
            logger.error(
                f"Database connection failed: {e}",
                extra={'attempts': self.connect_attempts}
            )
            raise DatabaseException(
                "Could not connect to database",
                details={'error': str(e)}
            ) from e

        self._session = session
        logger.debug("Database session opened")

    def close_connection(self) -> None:
        """Close the session; safe to call when nothing is open."""
        if self._session is None:
            return
        try:
            self._session.close()
        finally:
            self._session = None
            logger.debug("Database session closed")

    def load_all_questions(self) -> List["QuestionResponse"]:
        """Return every question ordered by ID."""
        from studentqa.models.question import Question
        from studentqa.schemas.question import QuestionResponse

        questions = (
            self.session.query(Question)
            .order_by(Question.id)
            .all()
        )
        return [QuestionResponse.model_validate(q) for q in questions]

    def __enter__(self) -> "DatabaseHelper":
        self.connect_to_database()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_connection()

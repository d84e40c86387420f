from contextlib import contextmanager
import time
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Iterator

from fanportal.models import Base

log = logging.getLogger(__name__)


def now_ns() -> int:
    """Current time as integer nanoseconds since the Unix epoch."""
    return time.time_ns()


class Storage:
    def __init__(self, db_url: str = "sqlite:///fanportal.db"):
        if db_url.startswith("sqlite") and ":memory:" in db_url:
            # One shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                db_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif db_url.startswith("sqlite"):
            # PortalService serializes access, so threads may share connections
            self.engine = create_engine(db_url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(db_url)
        self._Session = sessionmaker(bind=self.engine, expire_on_commit=False)

    @property
    def Session(self) -> sessionmaker:
        return self._Session

    def init_db(self):
        """
        Creates any missing tables. Long-lived databases are upgraded with the
        Alembic migrations in database/migrations, which track the same schema.
        """
        Base.metadata.create_all(self.engine)
        log.debug(f"Schema ready on {self.engine.url}")

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Yields a session that commits on success and rolls back on any error,
        so a failed call never leaves partial writes behind.
        """
        session = self._Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

"""
Key-based persistence operations used by the sync engine.

Every write runs in its own session and commits on its own; there is no
transaction spanning a batch.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from .database import get_engine, init_db
from .models import Company, Event, utcnow

logger = logging.getLogger(__name__)


class DirectoryStore:
    """Upsert/find operations over the companies and events tables."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "DirectoryStore":
        """Open (and initialize if needed) the store at database_url."""
        engine = get_engine(database_url)
        init_db(engine)
        return cls(engine)

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    def upsert_company(self, name: str, create: Dict[str, Any], update: Dict[str, Any]) -> Company:
        """
        Insert a company, or update the existing row with the same name.

        Args:
            name: Dedup key
            create: Column values used when no row exists
            update: Column values overwritten when the row exists

        Returns:
            The created or updated Company
        """
        with self._session() as session:
            company = session.exec(select(Company).where(Company.name == name)).first()
            if company is None:
                company = Company(name=name, **create)
            else:
                for field, value in update.items():
                    setattr(company, field, value)
                company.updated_at = utcnow()
            session.add(company)
            session.commit()
            session.refresh(company)
            return company

    def get_company(self, name: str) -> Optional[Company]:
        with self._session() as session:
            return session.exec(select(Company).where(Company.name == name)).first()

    def list_companies(self) -> List[Company]:
        with self._session() as session:
            return list(session.exec(select(Company).order_by(Company.name)).all())

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def find_event(self, title: str, start_date: datetime) -> Optional[Event]:
        """Find the event with exactly this (title, start_date) pair."""
        with self._session() as session:
            statement = select(Event).where(Event.title == title, Event.start_date == start_date)
            return session.exec(statement).first()

    def create_event(self, **fields: Any) -> Event:
        with self._session() as session:
            event = Event(**fields)
            session.add(event)
            session.commit()
            session.refresh(event)
            return event

    def list_events(self) -> List[Event]:
        with self._session() as session:
            return list(session.exec(select(Event).order_by(Event.start_date)).all())

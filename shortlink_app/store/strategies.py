"""
Record store strategies using Strategy Pattern.

The store is the single source of truth for short links. The cache in
front of it is disposable; everything here must be durable (SQL) or at
least consistent within a process (in-memory, for development and tests).
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shortlink_app.errors import DuplicateKey, StoreFailure
from shortlink_app.models.short_link import ShortLink, Visit
from shortlink_app.schemas.short_link import ShortLinkRecord, VisitEvent

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Abstract base class for record stores.

    All methods are async because store operations involve I/O.
    Implementations raise ``StoreFailure`` when the backend is unavailable.
    """

    @abstractmethod
    async def find_by_url(self, url: str) -> Optional[ShortLinkRecord]:
        """Record whose redirect URL equals ``url`` exactly, or None."""

    @abstractmethod
    async def find_by_id(
        self, short_id: str, include_history: bool = False
    ) -> Optional[ShortLinkRecord]:
        """
        Record for ``short_id``, or None.

        The visit history is only loaded when ``include_history`` is set;
        otherwise the returned record carries an empty history.
        """

    @abstractmethod
    async def find_and_append_visit(
        self, short_id: str, event: VisitEvent
    ) -> Optional[ShortLinkRecord]:
        """
        Append ``event`` to the record's visit history and return the record
        (without its history), in one atomic step. Returns None (and appends
        nothing) if absent.
        """

    @abstractmethod
    async def create(self, short_id: str, url: str) -> ShortLinkRecord:
        """
        Create a record with an empty visit history.

        Raises:
            DuplicateKey: ``short_id`` or ``url`` is already taken
        """

    @abstractmethod
    async def count(self) -> int:
        """Number of stored records."""


class SQLRecordStore(RecordStore):
    """
    SQLAlchemy implementation.

    Opens one session per operation so that background visit appends never
    share a session with the request that scheduled them.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def find_by_url(self, url: str) -> Optional[ShortLinkRecord]:
        try:
            with self.session_factory() as session:
                link = session.query(ShortLink).filter(
                    ShortLink.redirect_url == url
                ).first()
                return link.to_record() if link else None
        except SQLAlchemyError as e:
            raise StoreFailure(f"find_by_url failed: {e}") from e

    async def find_by_id(
        self, short_id: str, include_history: bool = False
    ) -> Optional[ShortLinkRecord]:
        try:
            with self.session_factory() as session:
                link = session.query(ShortLink).filter(
                    ShortLink.short_id == short_id
                ).first()
                return link.to_record(include_history) if link else None
        except SQLAlchemyError as e:
            raise StoreFailure(f"find_by_id failed: {e}") from e

    async def find_and_append_visit(
        self, short_id: str, event: VisitEvent
    ) -> Optional[ShortLinkRecord]:
        try:
            with self.session_factory() as session:
                link = (
                    session.query(ShortLink)
                    .filter(ShortLink.short_id == short_id)
                    .with_for_update()
                    .first()
                )
                if link is None:
                    return None
                session.add(Visit(short_link_id=link.id, timestamp=event.timestamp))
                session.commit()
                return link.to_record()
        except SQLAlchemyError as e:
            raise StoreFailure(f"find_and_append_visit failed: {e}") from e

    async def create(self, short_id: str, url: str) -> ShortLinkRecord:
        try:
            with self.session_factory() as session:
                link = ShortLink(short_id=short_id, redirect_url=url)
                session.add(link)
                try:
                    session.commit()
                except IntegrityError as e:
                    session.rollback()
                    taken = session.query(ShortLink.id).filter(
                        ShortLink.short_id == short_id
                    ).first()
                    if taken:
                        raise DuplicateKey("short_id", short_id) from e
                    raise DuplicateKey("redirect_url", url) from e
                return link.to_record()
        except SQLAlchemyError as e:
            raise StoreFailure(f"create failed: {e}") from e

    async def count(self) -> int:
        try:
            with self.session_factory() as session:
                return session.query(ShortLink).count()
        except SQLAlchemyError as e:
            raise StoreFailure(f"count failed: {e}") from e


class InMemoryRecordStore(RecordStore):
    """
    In-memory implementation using Python dicts.

    Enforces the same uniqueness rules as the SQL schema. A single lock
    makes find_and_append_visit and create atomic, mirroring what the
    database gives the SQL store.

    Used in development/testing environments.
    """

    def __init__(self):
        self._by_id: Dict[str, ShortLinkRecord] = {}
        self._id_by_url: Dict[str, str] = {}
        self._lock = threading.Lock()

    async def find_by_url(self, url: str) -> Optional[ShortLinkRecord]:
        with self._lock:
            short_id = self._id_by_url.get(url)
            return self._snapshot(short_id) if short_id else None

    async def find_by_id(
        self, short_id: str, include_history: bool = False
    ) -> Optional[ShortLinkRecord]:
        with self._lock:
            return self._snapshot(short_id, include_history)

    async def find_and_append_visit(
        self, short_id: str, event: VisitEvent
    ) -> Optional[ShortLinkRecord]:
        with self._lock:
            record = self._by_id.get(short_id)
            if record is None:
                return None
            record.visit_history.append(event)
            return self._snapshot(short_id)

    async def create(self, short_id: str, url: str) -> ShortLinkRecord:
        with self._lock:
            if short_id in self._by_id:
                raise DuplicateKey("short_id", short_id)
            if url in self._id_by_url:
                raise DuplicateKey("redirect_url", url)
            self._by_id[short_id] = ShortLinkRecord(
                short_id=short_id,
                redirect_url=url,
                visit_history=[],
                created_at=datetime.now(timezone.utc),
            )
            self._id_by_url[url] = short_id
            return self._snapshot(short_id)

    async def count(self) -> int:
        with self._lock:
            return len(self._by_id)

    def _snapshot(
        self, short_id: Optional[str], include_history: bool = False
    ) -> Optional[ShortLinkRecord]:
        # Callers get a copy so they can't mutate the stored history
        record = self._by_id.get(short_id) if short_id else None
        if record is None:
            return None
        if include_history:
            return record.model_copy(deep=True)
        return record.model_copy(update={"visit_history": []})

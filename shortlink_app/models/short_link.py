from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shortlink_app.database.connection import Base
from shortlink_app.schemas.short_link import ShortLinkRecord, VisitEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShortLink(Base):
    """
    One short ID bound to one redirect URL.

    Both columns are unique: ``short_id`` is the integrity backstop for
    ID allocation, ``redirect_url`` makes concurrent allocations of the
    same long URL collapse onto a single record.
    """
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short_id = Column(String(16), unique=True, nullable=False, index=True)
    redirect_url = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Insertion order is the visit order. Loaded only on access, so lookups
    # on the redirect path never pull a hot link's whole history.
    visits = relationship(
        "Visit",
        order_by="Visit.id",
        cascade="all, delete-orphan",
        lazy="select",
    )

    def to_record(self, include_history: bool = False) -> ShortLinkRecord:
        history = (
            [VisitEvent(timestamp=v.timestamp) for v in self.visits]
            if include_history else []
        )
        return ShortLinkRecord(
            short_id=self.short_id,
            redirect_url=self.redirect_url,
            visit_history=history,
            created_at=self.created_at,
        )


class Visit(Base):
    """Append-only visit history row."""
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short_link_id = Column(
        Integer, ForeignKey("short_links.id"), nullable=False, index=True
    )
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import JSON, Column, DateTime, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .schema import normalize_fields

Base = declarative_base()


def _utc_now():
    return datetime.now(timezone.utc)


class ChargeRecord:
    """
    One charging (or maintenance) session entry.

    The identifier is assigned by the record store and stays stable while
    the record's position in listings changes.
    """

    __slots__ = ('id', 'fields')

    def __init__(self, record_id: str, fields: Optional[Mapping[str, Any]] = None):
        self.id = record_id
        self.fields = normalize_fields(fields)

    def __eq__(self, other):
        if not isinstance(other, ChargeRecord):
            return NotImplemented
        return self.id == other.id and self.fields == other.fields

    def __repr__(self):
        return f"ChargeRecord(id={self.id!r}, date={self.fields.get('Date')!r})"

    def copy(self) -> "ChargeRecord":
        return ChargeRecord(self.id, self.fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fields': dict(self.fields),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChargeRecord":
        record_id = data.get('id')
        if record_id is not None and record_id != '':
            record_id = str(record_id)
        fields = data.get('fields')
        return cls(record_id, fields if isinstance(fields, Mapping) else None)


class StoredSnapshot(Base):
    """Record snapshots persisted under a versioned storage key."""

    __tablename__ = 'snapshots'

    key = Column(String(128), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)

    def to_dict(self):
        return {
            'key': self.key,
            'records': len(self.payload or []),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


def get_engine(database_url):
    """Create database engine."""
    return create_engine(database_url, pool_pre_ping=True)


def get_session(engine):
    """Create database session."""
    Session = sessionmaker(bind=engine)
    return Session()

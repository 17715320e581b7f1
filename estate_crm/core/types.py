"""
Column types shared by the table models.
"""
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from estate_crm.core.clock import as_utc


class UTCDateTime(TypeDecorator):
    """
    Timestamp stored as UTC and always loaded timezone-aware.

    Postgres keeps the offset in TIMESTAMPTZ; SQLite drops it, so naive
    values coming back are tagged as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return as_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return as_utc(value)

"""Shared base for domain entities

Also provides the exact integer column type used for token amounts and
second-granularity timestamps, plus the timezone-aware audit timestamp helpers.
"""

from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Base class for all persisted vault entities"""
    pass


class ExactInteger(TypeDecorator):
    """
    Arbitrary-size integer stored without loss of precision

    Token amounts are signed 128-bit values and timestamps/intervals are
    unsigned 64-bit values, both wider than BIGINT. PostgreSQL stores them
    as NUMERIC(precision, 0); SQLite has no exact wide numeric type so the
    decimal digits are stored as text. Unsigned values are zero-padded to
    the full precision so that text comparison orders them numerically.
    """

    impl = Numeric
    cache_ok = True

    def __init__(self, precision: int = 39, signed: bool = True):
        super().__init__()
        self.precision = precision
        self.signed = signed

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(self.precision + 1))
        return dialect.type_descriptor(Numeric(self.precision, 0))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            if self.signed:
                return str(int(value))
            return str(int(value)).zfill(self.precision)
        return Decimal(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


def Int128() -> ExactInteger:
    return ExactInteger(precision=39)


def UInt64() -> ExactInteger:
    return ExactInteger(precision=20, signed=False)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def UtcDateTime() -> DateTime:
    return DateTime(timezone=True)

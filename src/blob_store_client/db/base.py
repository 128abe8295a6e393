from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Annotated
from datetime import datetime

from sqlalchemy import MetaData, DateTime
from sqlalchemy.dialects.sqlite import DATETIME as SQLITE_DATETIME
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase, mapped_column
from sqlalchemy.sql.expression import FunctionElement
from sqlalchemy.types import TypeDecorator

from blob_store_client.utils.time_utils import to_utc

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)


class UTCDateTime(TypeDecorator):
    """
    Время в UTC с точностью до секунды.
    В базу уходит наивное UTC-значение, обратно приходит aware-datetime.
    На SQLite хранится текстом в формате YYYY-MM-DD HH:MM:SS.
    """
    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(SQLITE_DATETIME(truncate_microseconds=True))
        return dialect.type_descriptor(DateTime())

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        return to_utc(value).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        return to_utc(value)


class utc_timestamp(FunctionElement):
    """Текущее время на часах сервера БД, в UTC."""
    type = UTCDateTime()
    inherit_cache = True


@compiles(utc_timestamp)
def _utc_timestamp_default(element, compiler, **kw):
    # SQLite отдает CURRENT_TIMESTAMP уже в UTC
    return "CURRENT_TIMESTAMP"


@compiles(utc_timestamp, "postgresql")
def _utc_timestamp_pg(element, compiler, **kw):
    return "date_trunc('second', timezone('utc', CURRENT_TIMESTAMP))"


@compiles(utc_timestamp, "mysql")
def _utc_timestamp_mysql(element, compiler, **kw):
    return "UTC_TIMESTAMP()"


@compiles(utc_timestamp, "mssql")
def _utc_timestamp_mssql(element, compiler, **kw):
    return "GETUTCDATE()"


CreatedAt = Annotated[datetime, mapped_column(UTCDateTime, nullable=False)]
UpdatedAt = Annotated[datetime, mapped_column(UTCDateTime, nullable=False)]


@contextmanager
def get_connection(engine: Engine) -> Iterator[Connection]:
    """Одно соединение из пула на всю транзакцию; commit при выходе без ошибки."""
    with engine.begin() as conn:
        yield conn

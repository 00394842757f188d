"""공용 컬럼 타입 — Shared column types.

DateList stores a set of dates as a JSON array of ISO strings (JSONB on
PostgreSQL). Values are always written distinct and ascending, and read
back as ``list[date]``. UuidList stores an ordered list of UUIDs the same way.
"""

import uuid
from datetime import date
from typing import Any, Iterable

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator, TypeEngine


def normalize_dates(values: Iterable[date | str]) -> list[date]:
    """중복 제거 + 오름차순 정렬 (Distinct, ascending list of dates)."""
    result: set[date] = set()
    for value in values:
        result.add(value if isinstance(value, date) else date.fromisoformat(value))
    return sorted(result)


class DateList(TypeDecorator):
    """날짜 집합 컬럼 — Date-set column (JSON array of ISO dates).

    In-place mutation is not tracked; always assign a new list.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Iterable[date | str] | None, dialect: Dialect) -> list[str] | None:
        if value is None:
            return None
        return [d.isoformat() for d in normalize_dates(value)]

    def process_result_value(self, value: list[str] | None, dialect: Dialect) -> list[date]:
        if not value:
            return []
        return normalize_dates(value)


class UuidList(TypeDecorator):
    """UUID 목록 컬럼 — Ordered UUID list column (JSON array of strings).

    In-place mutation is not tracked; always assign a new list.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Iterable[uuid.UUID | str] | None, dialect: Dialect) -> list[str] | None:
        if value is None:
            return None
        return [str(item) for item in value]

    def process_result_value(self, value: list[str] | None, dialect: Dialect) -> list[uuid.UUID]:
        if not value:
            return []
        return [uuid.UUID(item) for item in value]

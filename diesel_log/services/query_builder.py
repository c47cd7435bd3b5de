"""
Construction des requetes filtrees / Filtered query builder.
Les valeurs sont toujours liees en parametres / Values are always bound as parameters.
"""

import enum
from dataclasses import dataclass
from datetime import date

from sqlalchemy import ColumnElement, Select, false, func, select

from diesel_log.models.diesel_record import DieselRecord
from diesel_log.services.validation import RecordFilter


class Bound(str, enum.Enum):
    START = "START"
    END = "END"


@dataclass(frozen=True)
class DatePredicate:
    """Borne inclusive sur record_date / Inclusive bound on record_date."""
    bound: Bound
    value: date

    def clause(self) -> ColumnElement[bool]:
        if self.bound is Bound.START:
            return DieselRecord.record_date >= self.value
        return DieselRecord.record_date <= self.value


class RecordQuery:
    """Accumule les predicats puis genere le SQL / Accumulates predicates then renders SQL."""

    def __init__(self):
        self._predicates: list[DatePredicate] = []
        self._empty = False

    @classmethod
    def from_filter(cls, record_filter: RecordFilter) -> "RecordQuery":
        query = cls()
        if record_filter.start_date is not None:
            query.since(record_filter.start_date)
        if record_filter.end_date is not None:
            query.until(record_filter.end_date)
        if record_filter.matches_nothing:
            query.nothing()
        return query

    @property
    def predicates(self) -> tuple[DatePredicate, ...]:
        return tuple(self._predicates)

    def since(self, value: date) -> "RecordQuery":
        self._predicates.append(DatePredicate(Bound.START, value))
        return self

    def until(self, value: date) -> "RecordQuery":
        self._predicates.append(DatePredicate(Bound.END, value))
        return self

    def nothing(self) -> "RecordQuery":
        """Aucune ligne / Match no row (unreadable bound)."""
        self._empty = True
        return self

    def _apply(self, statement: Select) -> Select:
        for predicate in self._predicates:
            statement = statement.where(predicate.clause())
        if self._empty:
            statement = statement.where(false())
        return statement

    def select(self) -> Select:
        """Date la plus recente d'abord, puis id DESC / Most recent date first, then id DESC."""
        statement = select(DieselRecord).order_by(DieselRecord.record_date.desc(), DieselRecord.id.desc())
        return self._apply(statement)

    def totals(self) -> Select:
        """Nombre et sommes / Count and sums over the filtered set."""
        statement = select(
            func.count(DieselRecord.id),
            func.coalesce(func.sum(DieselRecord.liters), 0),
            func.coalesce(func.sum(DieselRecord.price), 0),
        )
        return self._apply(statement)

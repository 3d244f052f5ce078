"""Query builder: turns a free-text search plus filters into parameterized SQL.

Every value (filter or search token) is carried as a bound parameter on a
``Clause``; the query text is rendered once, at the end, from the clause
list. Placeholders are therefore always numbered in the same order the
values are returned.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.sql.elements import TextClause
from sqlmodel import text

from ellarises.services.collections import (
    COLLECTIONS,
    Collection,
    CollectionSpec,
)


class QueryBuilderError(Exception):
    """Raised when a query cannot be built from the given arguments."""


class UnknownCollectionError(QueryBuilderError):
    pass


class UnknownFilterError(QueryBuilderError):
    pass


class ParamStyle(str, Enum):
    NUMERIC = "numeric"  # $1, $2, ... (PostgreSQL wire style)
    NAMED = "named"      # :p1, :p2, ... (SQLAlchemy text())

    def placeholder(self, position: int) -> str:
        if self is ParamStyle.NUMERIC:
            return f"${position}"
        return f":p{position}"


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive range filter. Either bound may be omitted."""
    low: Any = None
    high: Any = None


@dataclass(frozen=True, slots=True)
class Clause:
    """A single predicate comparing an SQL expression to one bound value."""
    expression: str
    operator: str
    value: Any

    def render(self, placeholder: str) -> str:
        return f"{self.expression} {self.operator} {placeholder}"


@dataclass(frozen=True, slots=True)
class CompiledQuery:
    """A fully built query: static SQL fragments plus ordered bound clauses."""
    select: str
    fixed_predicates: tuple[str, ...]
    clauses: tuple[Clause, ...]
    order_by: tuple[str, ...]
    limit: int | None = None
    offset: int | None = None

    @property
    def params(self) -> tuple[Any, ...]:
        values = [c.value for c in self.clauses]
        if self.limit is not None:
            values.append(self.limit)
        if self.offset is not None:
            values.append(self.offset)
        return tuple(values)

    @property
    def token_count(self) -> int:
        return sum(1 for c in self.clauses if c.operator == "LIKE")

    @property
    def sql(self) -> str:
        return self.render(ParamStyle.NUMERIC)

    def render(self, style: ParamStyle = ParamStyle.NUMERIC) -> str:
        position = 0

        def next_placeholder() -> str:
            nonlocal position
            position += 1
            return style.placeholder(position)

        predicates = list(self.fixed_predicates)
        predicates.extend(c.render(next_placeholder()) for c in self.clauses)

        parts = [self.select]
        if predicates:
            parts.append("WHERE " + " AND ".join(predicates))
        if self.order_by:
            parts.append("ORDER BY " + ", ".join(self.order_by))
        if self.limit is not None:
            parts.append(f"LIMIT {next_placeholder()}")
        if self.offset is not None:
            parts.append(f"OFFSET {next_placeholder()}")
        return "\n".join(parts)

    def named_params(self) -> dict[str, Any]:
        return {f"p{i}": value for i, value in enumerate(self.params, start=1)}

    def statement(self) -> TextClause:
        """SQLAlchemy statement binding the same values by name."""
        return text(self.render(ParamStyle.NAMED)).bindparams(**self.named_params())


def tokenize(search_phrase: str | None) -> list[str]:
    """Lowercase the phrase and split it on whitespace runs.

    Empty tokens are dropped; repeated tokens are kept.
    """
    if not search_phrase:
        return []
    return search_phrase.strip().lower().split()


def searchable_text(spec: CollectionSpec) -> str:
    """Single lowercased text expression covering every searchable column."""
    parts = [f"COALESCE({column}, '')" for column in spec.text_columns]
    parts.extend(f"CAST({column} AS TEXT)" for column in spec.id_columns)
    return "LOWER(" + " || ' ' || ".join(parts) + ")"


def resolve_collection(collection: Collection | str) -> CollectionSpec:
    try:
        return COLLECTIONS[Collection(collection)]
    except ValueError:
        raise UnknownCollectionError(f"Unknown collection: {collection!r}") from None


def _filter_clauses(
    spec: CollectionSpec, base_filters: Mapping[str, Any]
) -> list[Clause]:
    clauses: list[Clause] = []
    for name, value in base_filters.items():
        column = spec.filters.get(name)
        if column is None:
            raise UnknownFilterError(
                f"Unknown filter {name!r} for collection {spec.collection.value!r}"
            )
        if isinstance(value, Range):
            if value.low is not None:
                clauses.append(Clause(column, ">=", value.low))
            if value.high is not None:
                clauses.append(Clause(column, "<=", value.high))
        else:
            clauses.append(Clause(column, "=", value))
    return clauses


def compile_query(
    collection: Collection | str,
    base_filters: Mapping[str, Any] | None = None,
    search_phrase: str | None = "",
    *,
    limit: int | None = None,
    offset: int | None = None,
) -> CompiledQuery:
    """Build the search query for ``collection``.

    Filters become ANDed equality (or range) clauses; each search token
    becomes an ANDed ``LIKE '%token%'`` clause over the collection's
    searchable text, so a row matches only when every token is found.
    """
    spec = resolve_collection(collection)
    clauses = _filter_clauses(spec, base_filters or {})

    tokens = tokenize(search_phrase)
    if tokens:
        haystack = searchable_text(spec)
        clauses.extend(Clause(haystack, "LIKE", f"%{token}%") for token in tokens)

    return CompiledQuery(
        select=spec.select,
        fixed_predicates=spec.fixed_predicates,
        clauses=tuple(clauses),
        order_by=spec.order_by,
        limit=limit,
        offset=offset,
    )

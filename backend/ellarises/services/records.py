"""Record access: runs compiled search queries against the database."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlmodel import Session

from ellarises.services.collections import Collection
from ellarises.services.query_builder import CompiledQuery, compile_query

logger = logging.getLogger(__name__)


def fetch_rows(session: Session, compiled: CompiledQuery) -> list[dict[str, Any]]:
    """Execute ``compiled`` and return each row as a plain dict.

    Database errors propagate unchanged; callers decide how to report them.
    """
    result = session.exec(compiled.statement())  # type: ignore[call-overload]
    return [dict(row) for row in result.mappings()]


def search_records(
    session: Session,
    collection: Collection,
    filters: Mapping[str, Any] | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    compiled = compile_query(
        collection,
        filters,
        search,
        limit=limit,
        offset=skip if limit is not None else None,
    )
    logger.debug(
        "Searching %s: %d filter clause(s), %d token(s)",
        collection.value,
        len(compiled.clauses) - compiled.token_count,
        compiled.token_count,
    )
    return fetch_rows(session, compiled)

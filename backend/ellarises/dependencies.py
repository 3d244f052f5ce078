"""FastAPI dependencies shared by the list endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Query

from ellarises.config import get_settings


@dataclass(frozen=True, slots=True)
class Page:
    skip: int
    limit: int


def get_page(
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, description="Defaults to DEFAULT_PAGE_SIZE"),
) -> Page:
    """Resolve paging parameters against the configured page sizes.

    Raises HTTPException 422 if ``limit`` exceeds MAX_PAGE_SIZE.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_size
    if limit > settings.max_page_size:
        raise HTTPException(
            status_code=422,
            detail=f"limit cannot exceed {settings.max_page_size}",
        )
    return Page(skip=skip, limit=limit)

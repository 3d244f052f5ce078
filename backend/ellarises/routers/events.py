"""Event router: event search, detail with occurrences, and event upkeep."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, col, func, select

from ellarises.db import get_session
from ellarises.dependencies import Page, get_page
from ellarises.models.event import (
    Event,
    EventCreate,
    EventDetailRead,
    EventOccurrence,
    EventRead,
    EventRow,
    EventUpdate,
    OccurrenceRead,
    Registration,
)
from ellarises.services.collections import Collection
from ellarises.services.query_builder import Range
from ellarises.services.records import search_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


def _get_event(event_id: int, session: Session) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("", response_model=list[EventRow])
async def list_events(
    search: str | None = Query(None, max_length=500),
    event_type: str | None = Query(None),
    min_capacity: int | None = Query(None, ge=0),
    max_capacity: int | None = Query(None, ge=0),
    page: Page = Depends(get_page),
    session: Session = Depends(get_session),
) -> list[EventRow]:
    filters: dict[str, object] = {}
    if event_type:
        filters["event_type"] = event_type
    if min_capacity is not None or max_capacity is not None:
        filters["capacity"] = Range(min_capacity, max_capacity)

    rows = search_records(
        session, Collection.EVENTS, filters, search, skip=page.skip, limit=page.limit
    )
    return [EventRow.model_validate(row) for row in rows]


@router.get("/{event_id}", response_model=EventDetailRead)
async def get_event(
    event_id: int,
    session: Session = Depends(get_session),
) -> EventDetailRead:
    event = _get_event(event_id, session)

    registration_count = (
        select(func.count())
        .select_from(Registration)
        .where(Registration.event_occurrence_id == EventOccurrence.event_occurrence_id)
        .correlate(EventOccurrence)
        .scalar_subquery()
    )
    results = session.exec(
        select(EventOccurrence, registration_count)
        .where(EventOccurrence.event_id == event_id)
        .order_by(
            col(EventOccurrence.event_datetime_start).desc(),
            col(EventOccurrence.event_occurrence_id).desc(),
        )
    ).all()

    return EventDetailRead(
        event_id=event.event_id,
        event_name=event.event_name,
        event_type=event.event_type,
        event_description=event.event_description,
        event_recurrence_pattern=event.event_recurrence_pattern,
        event_default_capacity=event.event_default_capacity,
        occurrences=[
            OccurrenceRead(
                **occurrence.model_dump(),
                registration_count=count,
            )
            for occurrence, count in results
        ],
    )


@router.post("", response_model=EventRead, status_code=201)
async def create_event(
    body: EventCreate,
    session: Session = Depends(get_session),
) -> EventRead:
    name = body.event_name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Event name cannot be empty")
    if body.event_default_capacity is not None and body.event_default_capacity < 0:
        raise HTTPException(status_code=422, detail="Capacity cannot be negative")

    event = Event(**body.model_dump(exclude={"event_name"}), event_name=name)
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info("Created event %s", event.event_id)
    return EventRead.model_validate(event)


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: int,
    body: EventUpdate,
    session: Session = Depends(get_session),
) -> EventRead:
    event = _get_event(event_id, session)

    update_data = body.model_dump(exclude_unset=True)
    if "event_name" in update_data:
        name = (update_data["event_name"] or "").strip()
        if not name:
            raise HTTPException(status_code=422, detail="Event name cannot be empty")
        update_data["event_name"] = name
    capacity = update_data.get("event_default_capacity")
    if capacity is not None and capacity < 0:
        raise HTTPException(status_code=422, detail="Capacity cannot be negative")

    for key, value in update_data.items():
        setattr(event, key, value)

    session.add(event)
    session.commit()
    session.refresh(event)
    return EventRead.model_validate(event)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: int,
    session: Session = Depends(get_session),
) -> None:
    event = _get_event(event_id, session)

    occurrences = session.exec(
        select(EventOccurrence).where(EventOccurrence.event_id == event_id)
    ).all()
    occurrence_ids = [o.event_occurrence_id for o in occurrences]

    # Registrations, then occurrences, then the event itself
    if occurrence_ids:
        registrations = session.exec(
            select(Registration).where(col(Registration.event_occurrence_id).in_(occurrence_ids))
        ).all()
        for registration in registrations:
            session.delete(registration)
        session.flush()
    for occurrence in occurrences:
        session.delete(occurrence)
    session.flush()
    session.delete(event)
    session.commit()
    logger.info("Deleted event %s with %d occurrence(s)", event_id, len(occurrences))

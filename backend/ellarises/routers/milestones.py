from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from ellarises.db import get_session
from ellarises.dependencies import Page, get_page
from ellarises.models.person import (
    PARTICIPANT_ROLE,
    Milestone,
    MilestoneRead,
    MilestoneRow,
    MilestoneUpdate,
    Person,
    PersonMilestoneCreate,
)
from ellarises.services.collections import Collection
from ellarises.services.milestones import add_milestone
from ellarises.services.query_builder import Range
from ellarises.services.records import search_records

router = APIRouter(prefix="/api/milestones", tags=["milestones"])


def _get_milestone(person_id: int, milestone_no: int, session: Session) -> Milestone:
    milestone = session.get(Milestone, (person_id, milestone_no))
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone not found")
    return milestone


@router.get("", response_model=list[MilestoneRow])
async def list_milestones(
    search: str | None = Query(None, max_length=500),
    person_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    page: Page = Depends(get_page),
    session: Session = Depends(get_session),
) -> list[MilestoneRow]:
    filters: dict[str, object] = {}
    if person_id is not None:
        filters["person_id"] = person_id
    if date_from or date_to:
        filters["milestone_date"] = Range(date_from, date_to)

    rows = search_records(
        session, Collection.MILESTONES, filters, search, skip=page.skip, limit=page.limit
    )
    return [MilestoneRow.model_validate(row) for row in rows]


@router.post("", response_model=MilestoneRead, status_code=201)
async def create_milestone(
    body: PersonMilestoneCreate,
    session: Session = Depends(get_session),
) -> MilestoneRead:
    person = session.get(Person, body.person_id)
    if not person or person.role != PARTICIPANT_ROLE:
        raise HTTPException(status_code=404, detail="Participant not found")

    title = body.milestone_title.strip()
    if not title:
        raise HTTPException(status_code=422, detail="Milestone title cannot be empty")

    milestone = add_milestone(session, body.person_id, title, body.milestone_date)
    return MilestoneRead.model_validate(milestone)


@router.patch("/{person_id}/{milestone_no}", response_model=MilestoneRead)
async def update_milestone(
    person_id: int,
    milestone_no: int,
    body: MilestoneUpdate,
    session: Session = Depends(get_session),
) -> MilestoneRead:
    milestone = _get_milestone(person_id, milestone_no, session)

    update_data = body.model_dump(exclude_unset=True)
    if "milestone_title" in update_data:
        title = (update_data["milestone_title"] or "").strip()
        if not title:
            raise HTTPException(status_code=422, detail="Milestone title cannot be empty")
        milestone.milestone_title = title
    if "milestone_date" in update_data:
        milestone.milestone_date = update_data["milestone_date"]

    session.add(milestone)
    session.commit()
    session.refresh(milestone)
    return MilestoneRead.model_validate(milestone)


@router.delete("/{person_id}/{milestone_no}", status_code=204)
async def delete_milestone(
    person_id: int,
    milestone_no: int,
    session: Session = Depends(get_session),
) -> None:
    milestone = _get_milestone(person_id, milestone_no, session)
    session.delete(milestone)
    session.commit()

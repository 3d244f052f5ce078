"""Participant router: search, detail, create/update/delete and milestones."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, col, select

from ellarises.db import get_session
from ellarises.dependencies import Page, get_page
from ellarises.models.donation import Donation
from ellarises.models.event import Registration
from ellarises.models.person import (
    PARTICIPANT_ROLE,
    Milestone,
    MilestoneCreate,
    MilestoneRead,
    ParticipantCreate,
    ParticipantDetailRead,
    ParticipantRead,
    ParticipantRow,
    ParticipantUpdate,
    Person,
)
from ellarises.services.collections import Collection
from ellarises.services.milestones import add_milestone
from ellarises.services.records import search_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/participants", tags=["participants"])


def _get_participant(person_id: int, session: Session) -> Person:
    person = session.get(Person, person_id)
    if not person or person.role != PARTICIPANT_ROLE:
        raise HTTPException(status_code=404, detail="Participant not found")
    return person


@router.get("", response_model=list[ParticipantRow])
async def list_participants(
    search: str | None = Query(None, max_length=500, description="Words to match (all must match)"),
    city: str | None = Query(None),
    state: str | None = Query(None),
    field_of_interest: str | None = Query(None),
    page: Page = Depends(get_page),
    session: Session = Depends(get_session),
) -> list[ParticipantRow]:
    filters: dict[str, str] = {"role": PARTICIPANT_ROLE}
    if city:
        filters["city"] = city
    if state:
        filters["state"] = state
    if field_of_interest:
        filters["field_of_interest"] = field_of_interest

    rows = search_records(
        session,
        Collection.PARTICIPANTS,
        filters,
        search,
        skip=page.skip,
        limit=page.limit,
    )
    return [ParticipantRow.model_validate(row) for row in rows]


@router.post("", response_model=ParticipantRead, status_code=201)
async def create_participant(
    body: ParticipantCreate,
    session: Session = Depends(get_session),
) -> ParticipantRead:
    first_name = body.first_name.strip()
    last_name = body.last_name.strip()
    if not first_name or not last_name:
        raise HTTPException(status_code=422, detail="First and last name are required")

    person = Person(
        **body.model_dump(exclude={"first_name", "last_name"}),
        first_name=first_name,
        last_name=last_name,
        role=PARTICIPANT_ROLE,
    )
    session.add(person)
    session.commit()
    session.refresh(person)
    logger.info("Created participant %s", person.person_id)
    return ParticipantRead.model_validate(person)


@router.get("/{person_id}", response_model=ParticipantDetailRead)
async def get_participant(
    person_id: int,
    session: Session = Depends(get_session),
) -> ParticipantDetailRead:
    person = _get_participant(person_id, session)

    milestones = session.exec(
        select(Milestone)
        .where(Milestone.person_id == person_id)
        .order_by(col(Milestone.milestone_date).desc(), col(Milestone.milestone_no).desc())
    ).all()

    return ParticipantDetailRead(
        **ParticipantRead.model_validate(person).model_dump(),
        milestones=[MilestoneRead.model_validate(m) for m in milestones],
    )


@router.patch("/{person_id}", response_model=ParticipantRead)
async def update_participant(
    person_id: int,
    body: ParticipantUpdate,
    session: Session = Depends(get_session),
) -> ParticipantRead:
    person = _get_participant(person_id, session)

    update_data = body.model_dump(exclude_unset=True)
    for name_field in ("first_name", "last_name"):
        if name_field in update_data:
            value = (update_data[name_field] or "").strip()
            if not value:
                raise HTTPException(status_code=422, detail="First and last name are required")
            update_data[name_field] = value

    for key, value in update_data.items():
        setattr(person, key, value)

    session.add(person)
    session.commit()
    session.refresh(person)
    logger.info("Updated participant %s", person_id)
    return ParticipantRead.model_validate(person)


@router.delete("/{person_id}", status_code=204)
async def delete_participant(
    person_id: int,
    session: Session = Depends(get_session),
) -> None:
    person = _get_participant(person_id, session)

    # Dependent rows go first to keep foreign keys satisfied
    for model in (Milestone, Registration, Donation):
        dependents = session.exec(
            select(model).where(model.person_id == person_id)
        ).all()
        for row in dependents:
            session.delete(row)
    session.flush()
    session.delete(person)
    session.commit()
    logger.info("Deleted participant %s", person_id)


@router.post("/{person_id}/milestones", response_model=MilestoneRead, status_code=201)
async def create_participant_milestone(
    person_id: int,
    body: MilestoneCreate,
    session: Session = Depends(get_session),
) -> MilestoneRead:
    _get_participant(person_id, session)

    title = body.milestone_title.strip()
    if not title:
        raise HTTPException(status_code=422, detail="Milestone title cannot be empty")

    milestone = add_milestone(session, person_id, title, body.milestone_date)
    return MilestoneRead.model_validate(milestone)


@router.delete("/{person_id}/milestones/{milestone_no}", status_code=204)
async def delete_participant_milestone(
    person_id: int,
    milestone_no: int,
    session: Session = Depends(get_session),
) -> None:
    _get_participant(person_id, session)

    milestone = session.get(Milestone, (person_id, milestone_no))
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone not found")

    session.delete(milestone)
    session.commit()

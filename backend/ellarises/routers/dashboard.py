from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, func, select

from ellarises.db import get_session
from ellarises.models.donation import Donation
from ellarises.models.event import Event, Registration
from ellarises.models.person import PARTICIPANT_ROLE, Person

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class DashboardStats(BaseModel):
    participants: int
    events: int
    registrations: int
    donations: int


@router.get("", response_model=DashboardStats)
async def dashboard_stats(session: Session = Depends(get_session)) -> DashboardStats:
    participants = session.exec(
        select(func.count()).select_from(Person).where(Person.role == PARTICIPANT_ROLE)
    ).one()
    events = session.exec(select(func.count()).select_from(Event)).one()
    registrations = session.exec(select(func.count()).select_from(Registration)).one()
    donations = session.exec(select(func.count()).select_from(Donation)).one()
    return DashboardStats(
        participants=participants,
        events=events,
        registrations=registrations,
        donations=donations,
    )

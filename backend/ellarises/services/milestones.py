"""Milestone entry: milestones are numbered 1, 2, 3... per participant."""
from __future__ import annotations

import logging
from datetime import date

from sqlmodel import Session, func, select

from ellarises.models.person import Milestone

logger = logging.getLogger(__name__)


def next_milestone_no(session: Session, person_id: int) -> int:
    return session.exec(
        select(func.coalesce(func.max(Milestone.milestone_no), 0) + 1)
        .where(Milestone.person_id == person_id)
    ).one()


def add_milestone(
    session: Session,
    person_id: int,
    title: str,
    milestone_date: date | None = None,
) -> Milestone:
    """Record a milestone under the participant's next free number.

    Numbers freed by deletes are not reused unless they were the highest.
    """
    milestone = Milestone(
        person_id=person_id,
        milestone_no=next_milestone_no(session, person_id),
        milestone_title=title,
        milestone_date=milestone_date,
    )
    session.add(milestone)
    session.commit()
    session.refresh(milestone)
    logger.info("Added milestone %s for person %s", milestone.milestone_no, person_id)
    return milestone

"""Survey router: post-event surveys, stored on the event registration."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from ellarises.db import get_session
from ellarises.dependencies import Page, get_page
from ellarises.models.event import Registration, SurveyRow, SurveyScores, SurveySubmit
from ellarises.services.collections import Collection
from ellarises.services.query_builder import Range
from ellarises.services.records import search_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/surveys", tags=["surveys"])

SCORE_FIELDS = (
    "survey_satisfaction_score",
    "survey_usefulness_score",
    "survey_instructor_score",
    "survey_recommendation_score",
)
MIN_SCORE = 1
MAX_SCORE = 5


def _check_scores(values: dict) -> None:
    for field in SCORE_FIELDS:
        score = values.get(field)
        if score is not None and not MIN_SCORE <= score <= MAX_SCORE:
            raise HTTPException(
                status_code=422,
                detail=f"{field} must be between {MIN_SCORE} and {MAX_SCORE}",
            )


def _overall_score(registration: Registration) -> float | None:
    """Mean of the answered scores, rounded to two places."""
    scores = [getattr(registration, field) for field in SCORE_FIELDS]
    answered = [s for s in scores if s is not None]
    if not answered:
        return None
    return round(sum(answered) / len(answered), 2)


def _get_survey_row(person_id: int, event_occurrence_id: int, session: Session) -> SurveyRow:
    # Same query as the list view, narrowed to one registration
    rows = search_records(
        session,
        Collection.SURVEYS,
        {"person_id": person_id, "occurrence_id": event_occurrence_id},
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Survey not found")
    return SurveyRow.model_validate(rows[0])


def _get_submitted(person_id: int, event_occurrence_id: int, session: Session) -> Registration:
    registration = session.get(Registration, (person_id, event_occurrence_id))
    if not registration or registration.survey_submission_date is None:
        raise HTTPException(status_code=404, detail="Survey not found")
    return registration


@router.get("", response_model=list[SurveyRow])
async def list_surveys(
    search: str | None = Query(None, max_length=500),
    event_id: int | None = Query(None),
    min_score: float | None = Query(None, ge=0),
    max_score: float | None = Query(None, ge=0),
    page: Page = Depends(get_page),
    session: Session = Depends(get_session),
) -> list[SurveyRow]:
    filters: dict[str, object] = {}
    if event_id is not None:
        filters["event_id"] = event_id
    if min_score is not None or max_score is not None:
        filters["overall_score"] = Range(min_score, max_score)

    rows = search_records(
        session, Collection.SURVEYS, filters, search, skip=page.skip, limit=page.limit
    )
    return [SurveyRow.model_validate(row) for row in rows]


@router.post("", response_model=SurveyRow, status_code=201)
async def submit_survey(
    body: SurveySubmit,
    session: Session = Depends(get_session),
) -> SurveyRow:
    """Record survey answers for a registration, replacing any earlier answers."""
    registration = session.get(Registration, (body.person_id, body.event_occurrence_id))
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")

    answers = body.model_dump(exclude={"person_id", "event_occurrence_id"})
    _check_scores(answers)
    for key, value in answers.items():
        setattr(registration, key, value)
    registration.survey_overall_score = _overall_score(registration)
    registration.survey_submission_date = datetime.now(timezone.utc)

    session.add(registration)
    session.commit()
    logger.info(
        "Survey submitted for person %s, occurrence %s",
        body.person_id,
        body.event_occurrence_id,
    )
    return _get_survey_row(body.person_id, body.event_occurrence_id, session)


@router.get("/{person_id}/{event_occurrence_id}", response_model=SurveyRow)
async def get_survey(
    person_id: int,
    event_occurrence_id: int,
    session: Session = Depends(get_session),
) -> SurveyRow:
    return _get_survey_row(person_id, event_occurrence_id, session)


@router.patch("/{person_id}/{event_occurrence_id}", response_model=SurveyRow)
async def update_survey(
    person_id: int,
    event_occurrence_id: int,
    body: SurveyScores,
    session: Session = Depends(get_session),
) -> SurveyRow:
    registration = _get_submitted(person_id, event_occurrence_id, session)

    update_data = body.model_dump(exclude_unset=True)
    _check_scores(update_data)
    for key, value in update_data.items():
        setattr(registration, key, value)
    registration.survey_overall_score = _overall_score(registration)

    session.add(registration)
    session.commit()
    return _get_survey_row(person_id, event_occurrence_id, session)


@router.delete("/{person_id}/{event_occurrence_id}", status_code=204)
async def delete_survey(
    person_id: int,
    event_occurrence_id: int,
    session: Session = Depends(get_session),
) -> None:
    """Clear the survey answers; the registration itself is kept."""
    registration = _get_submitted(person_id, event_occurrence_id, session)

    for field in (*SCORE_FIELDS, "survey_overall_score", "survey_comments", "survey_submission_date"):
        setattr(registration, field, None)

    session.add(registration)
    session.commit()

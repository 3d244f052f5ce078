from __future__ import annotations

import os

# Set test environment BEFORE importing ellarises modules.
# ellarises.db creates the engine at module level using get_settings().db_url,
# so we must override the env vars before any app imports.
os.environ.setdefault("DB_URL", "sqlite://")

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from ellarises.db import get_session
from ellarises.main import app as fastapi_app
from ellarises.models.donation import Donation
from ellarises.models.event import Event, EventOccurrence, Registration
from ellarises.models.person import Milestone, Person


# ── Database fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool so every connection shares the same in-memory database.
    Recreates tables per test for full isolation.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a fresh session per test."""
    with Session(engine) as session:
        yield session


# ── HTTP client fixtures ──────────────────────────────────────────────


@pytest.fixture(name="client")
def client_fixture(session):
    """FastAPI TestClient with overridden DB session."""

    def _get_session_override():
        yield session

    fastapi_app.dependency_overrides[get_session] = _get_session_override
    with TestClient(fastapi_app) as client:
        yield client
    fastapi_app.dependency_overrides.clear()


# ── Seed data ─────────────────────────────────────────────────────────


def _add(session: Session, obj):
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


@pytest.fixture(name="people")
def people_fixture(session: Session) -> dict[str, Person]:
    """A handful of participants plus one donor and one staff member."""
    return {
        "maria": _add(session, Person(
            first_name="Maria", last_name="Rodriguez", email="maria.r@example.org",
            city="Provo", state="UT", school_or_employer="Timpview High",
            field_of_interest="Engineering",
        )),
        "mariana": _add(session, Person(
            first_name="Mariana", last_name="Lopez", email="mlopez@example.org",
            city="Orem", state="UT", field_of_interest="Art",
        )),
        "jane": _add(session, Person(
            first_name="Jane", last_name="Doe", email=None, phone=None,
            city="Salt Lake City", state="UT", field_of_interest="Mathematics",
        )),
        "ana": _add(session, Person(
            first_name="Ana", last_name="Rodriguez", email="ana@example.org",
            city="Provo", state="UT", field_of_interest="Technology",
        )),
        "donor": _add(session, Person(
            first_name="Dana", last_name="Giver", email="dana@example.org",
            role="donor",
        )),
        "staff": _add(session, Person(
            first_name="Maria", last_name="Admin", email="staff@example.org",
            role="manager",
        )),
    }


@pytest.fixture(name="events")
def events_fixture(session: Session) -> dict[str, Event]:
    return {
        "robotics": _add(session, Event(
            event_name="Robotics Workshop", event_type="Workshop",
            event_description="Build a line-following robot",
            event_recurrence_pattern="Monthly", event_default_capacity=20,
        )),
        "art": _add(session, Event(
            event_name="Art Night", event_type="Social",
            event_description=None, event_default_capacity=50,
        )),
        "coding": _add(session, Event(
            event_name="Coding Camp", event_type="Workshop",
            event_description="Intro to Python", event_default_capacity=15,
        )),
    }


@pytest.fixture(name="occurrences")
def occurrences_fixture(session: Session, events) -> dict[str, EventOccurrence]:
    return {
        "robotics_jan": _add(session, EventOccurrence(
            event_id=events["robotics"].event_id,
            event_datetime_start=datetime(2024, 1, 15, 17, 0),
            event_location="STEM Lab",
        )),
        "robotics_feb": _add(session, EventOccurrence(
            event_id=events["robotics"].event_id,
            event_datetime_start=datetime(2024, 2, 15, 17, 0),
            event_location="STEM Lab",
        )),
        "art_mar": _add(session, EventOccurrence(
            event_id=events["art"].event_id,
            event_datetime_start=datetime(2024, 3, 1, 18, 0),
            event_location="Gallery",
        )),
    }


@pytest.fixture(name="registrations")
def registrations_fixture(session: Session, people, occurrences) -> list[Registration]:
    """Three submitted surveys and one registration without a survey."""
    rows = [
        Registration(
            person_id=people["maria"].person_id,
            event_occurrence_id=occurrences["robotics_jan"].event_occurrence_id,
            survey_satisfaction_score=5, survey_usefulness_score=4,
            survey_instructor_score=5, survey_recommendation_score=4,
            survey_overall_score=4.5, survey_comments="Loved it",
            survey_submission_date=datetime(2024, 1, 16, 9, 0),
        ),
        Registration(
            person_id=people["jane"].person_id,
            event_occurrence_id=occurrences["robotics_feb"].event_occurrence_id,
            survey_satisfaction_score=3, survey_usefulness_score=3,
            survey_instructor_score=3, survey_recommendation_score=3,
            survey_overall_score=3.0,
            survey_submission_date=datetime(2024, 2, 16, 9, 0),
        ),
        Registration(
            person_id=people["ana"].person_id,
            event_occurrence_id=occurrences["art_mar"].event_occurrence_id,
            survey_satisfaction_score=4, survey_usefulness_score=5,
            survey_instructor_score=4, survey_recommendation_score=5,
            survey_overall_score=4.5,
            survey_submission_date=datetime(2024, 3, 2, 9, 0),
        ),
        Registration(
            person_id=people["mariana"].person_id,
            event_occurrence_id=occurrences["art_mar"].event_occurrence_id,
        ),
    ]
    for row in rows:
        session.add(row)
    session.commit()
    return rows


@pytest.fixture(name="milestones")
def milestones_fixture(session: Session, people) -> list[Milestone]:
    rows = [
        Milestone(
            person_id=people["maria"].person_id, milestone_no=1,
            milestone_title="Completed FAFSA", milestone_date=date(2024, 1, 10),
        ),
        Milestone(
            person_id=people["maria"].person_id, milestone_no=2,
            milestone_title="Accepted to university", milestone_date=date(2024, 4, 1),
        ),
        Milestone(
            person_id=people["jane"].person_id, milestone_no=1,
            milestone_title="First robotics competition", milestone_date=date(2024, 2, 20),
        ),
    ]
    for row in rows:
        session.add(row)
    session.commit()
    return rows


@pytest.fixture(name="donations")
def donations_fixture(session: Session, people) -> list[Donation]:
    rows = [
        Donation(person_id=people["donor"].person_id, donation_date=date(2024, 1, 5), donation_amount=100.0),
        Donation(person_id=people["donor"].person_id, donation_date=date(2024, 3, 5), donation_amount=250.0),
        Donation(person_id=people["maria"].person_id, donation_date=date(2024, 2, 5), donation_amount=25.0),
    ]
    for row in rows:
        session.add(row)
    session.commit()
    for row in rows:
        session.refresh(row)
    return rows

"""Event models: events, their scheduled occurrences and registrations.

A registration doubles as the survey record: the survey columns stay NULL
until the participant submits feedback for that occurrence.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class Event(SQLModel, table=True):
    __tablename__ = "event"

    event_id: int | None = Field(default=None, primary_key=True)
    event_name: str = Field(index=True)
    event_type: str | None = Field(default=None)
    event_description: str | None = Field(default=None)
    event_recurrence_pattern: str | None = Field(default=None)
    event_default_capacity: int | None = Field(default=None)


class EventOccurrence(SQLModel, table=True):
    __tablename__ = "event_occurrence"

    event_occurrence_id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="event.event_id", index=True)
    event_datetime_start: datetime | None = Field(default=None)
    event_datetime_end: datetime | None = Field(default=None)
    event_location: str | None = Field(default=None)
    event_capacity: int | None = Field(default=None)


class Registration(SQLModel, table=True):
    __tablename__ = "registration"

    person_id: int = Field(foreign_key="person.person_id", primary_key=True)
    event_occurrence_id: int = Field(
        foreign_key="event_occurrence.event_occurrence_id", primary_key=True
    )
    registration_status: str | None = Field(default=None)
    survey_satisfaction_score: int | None = Field(default=None)
    survey_usefulness_score: int | None = Field(default=None)
    survey_instructor_score: int | None = Field(default=None)
    survey_recommendation_score: int | None = Field(default=None)
    survey_overall_score: float | None = Field(default=None)
    survey_comments: str | None = Field(default=None)
    survey_submission_date: datetime | None = Field(default=None)


# --- Pydantic schemas ---


class EventCreate(BaseModel):
    event_name: str
    event_type: str | None = None
    event_description: str | None = None
    event_recurrence_pattern: str | None = None
    event_default_capacity: int | None = None


class EventUpdate(BaseModel):
    event_name: str | None = None
    event_type: str | None = None
    event_description: str | None = None
    event_recurrence_pattern: str | None = None
    event_default_capacity: int | None = None


class EventRead(BaseModel):
    event_id: int
    event_name: str
    event_type: str | None
    event_description: str | None
    event_recurrence_pattern: str | None
    event_default_capacity: int | None

    model_config = {"from_attributes": True}


class EventRow(BaseModel):
    event_id: int
    event_name: str
    event_type: str | None
    event_description: str | None
    event_recurrence_pattern: str | None
    event_default_capacity: int | None
    occurrence_count: int = 0


class OccurrenceRead(BaseModel):
    event_occurrence_id: int
    event_id: int
    event_datetime_start: datetime | None
    event_datetime_end: datetime | None
    event_location: str | None
    event_capacity: int | None
    registration_count: int = 0


class EventDetailRead(BaseModel):
    event_id: int
    event_name: str
    event_type: str | None
    event_description: str | None
    event_recurrence_pattern: str | None
    event_default_capacity: int | None
    occurrences: list[OccurrenceRead] = []

    model_config = {"from_attributes": True}


class SurveyRow(BaseModel):
    """Submitted survey joined with participant and event names."""
    person_id: int
    event_occurrence_id: int
    survey_satisfaction_score: int | None
    survey_usefulness_score: int | None
    survey_instructor_score: int | None
    survey_recommendation_score: int | None
    survey_overall_score: float | None
    survey_comments: str | None
    survey_submission_date: datetime
    first_name: str | None
    last_name: str | None
    email: str | None
    event_id: int
    event_name: str
    event_datetime_start: datetime | None


class SurveyScores(BaseModel):
    """Feedback answers; scores run from 1 to 5."""
    survey_satisfaction_score: int | None = None
    survey_usefulness_score: int | None = None
    survey_instructor_score: int | None = None
    survey_recommendation_score: int | None = None
    survey_comments: str | None = None


class SurveySubmit(SurveyScores):
    person_id: int
    event_occurrence_id: int

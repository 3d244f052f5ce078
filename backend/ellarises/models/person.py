"""Person model: participants, donors and their milestones."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel
from sqlmodel import Field, SQLModel

PARTICIPANT_ROLE = "participant"
DONOR_ROLE = "donor"


class Person(SQLModel, table=True):
    __tablename__ = "person"

    person_id: int | None = Field(default=None, primary_key=True)
    email: str | None = Field(default=None, index=True)
    first_name: str | None = Field(default=None)
    last_name: str | None = Field(default=None, index=True)
    dob: date | None = Field(default=None)
    role: str = Field(default=PARTICIPANT_ROLE, index=True)
    phone: str | None = Field(default=None)
    city: str | None = Field(default=None)
    state: str | None = Field(default=None)
    zip: str | None = Field(default=None)
    school_or_employer: str | None = Field(default=None)
    field_of_interest: str | None = Field(default=None)


class Milestone(SQLModel, table=True):
    """Achievement recorded against a participant; numbered per person."""
    __tablename__ = "milestone"

    person_id: int = Field(foreign_key="person.person_id", primary_key=True)
    milestone_no: int = Field(primary_key=True)
    milestone_title: str
    milestone_date: date | None = Field(default=None)


# --- Pydantic schemas ---


class ParticipantCreate(BaseModel):
    email: str | None = None
    first_name: str
    last_name: str
    dob: date | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    school_or_employer: str | None = None
    field_of_interest: str | None = None


class ParticipantUpdate(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    dob: date | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    school_or_employer: str | None = None
    field_of_interest: str | None = None


class ParticipantRow(BaseModel):
    """Participant as returned by the list endpoint."""
    person_id: int
    email: str | None
    first_name: str | None
    last_name: str | None
    role: str
    phone: str | None
    city: str | None
    state: str | None
    school_or_employer: str | None
    field_of_interest: str | None


class MilestoneCreate(BaseModel):
    milestone_title: str
    milestone_date: date | None = None


class PersonMilestoneCreate(MilestoneCreate):
    """Milestone entered from the milestone list, naming the participant."""
    person_id: int


class MilestoneUpdate(BaseModel):
    milestone_title: str | None = None
    milestone_date: date | None = None


class MilestoneRead(BaseModel):
    person_id: int
    milestone_no: int
    milestone_title: str
    milestone_date: date | None

    model_config = {"from_attributes": True}


class MilestoneRow(MilestoneRead):
    """Milestone joined with the participant's name, for the list endpoint."""
    first_name: str | None
    last_name: str | None
    email: str | None


class ParticipantRead(BaseModel):
    person_id: int
    email: str | None
    first_name: str | None
    last_name: str | None
    dob: date | None
    role: str
    phone: str | None
    city: str | None
    state: str | None
    zip: str | None
    school_or_employer: str | None
    field_of_interest: str | None

    model_config = {"from_attributes": True}


class ParticipantDetailRead(ParticipantRead):
    milestones: list[MilestoneRead] = []

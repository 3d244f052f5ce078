"""Donation model."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class Donation(SQLModel, table=True):
    __tablename__ = "donation"

    donation_id: int | None = Field(default=None, primary_key=True)
    person_id: int = Field(foreign_key="person.person_id", index=True)
    donation_date: date | None = Field(default=None)
    donation_amount: float = Field(default=0.0)


# --- Pydantic schemas ---


class DonationCreate(BaseModel):
    person_id: int
    donation_date: date | None = None
    donation_amount: float


class DonationUpdate(BaseModel):
    person_id: int | None = None
    donation_date: date | None = None
    donation_amount: float | None = None


class PublicDonation(BaseModel):
    """Gift entered by a visitor; the donor is matched by email."""
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    donation_amount: float


class DonationRead(BaseModel):
    donation_id: int
    person_id: int
    donation_date: date | None
    donation_amount: float

    model_config = {"from_attributes": True}


class DonationRow(BaseModel):
    donation_id: int
    person_id: int
    donation_date: date | None
    donation_amount: float
    first_name: str | None
    last_name: str | None
    email: str | None


class DonationList(BaseModel):
    donations: list[DonationRow]
    total_amount: float

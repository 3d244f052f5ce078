"""Donation router: donation search with the running total, and donation entry."""
from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, func, select

from ellarises.db import get_session
from ellarises.dependencies import Page, get_page
from ellarises.models.donation import (
    Donation,
    DonationCreate,
    DonationList,
    DonationRead,
    DonationRow,
    DonationUpdate,
    PublicDonation,
)
from ellarises.models.person import DONOR_ROLE, Person
from ellarises.services.collections import Collection
from ellarises.services.query_builder import Range
from ellarises.services.records import search_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/donations", tags=["donations"])


def _get_donation(donation_id: int, session: Session) -> Donation:
    donation = session.get(Donation, donation_id)
    if not donation:
        raise HTTPException(status_code=404, detail="Donation not found")
    return donation


def _get_person(person_id: int, session: Session) -> Person:
    person = session.get(Person, person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


def _check_amount(amount: float) -> None:
    if amount <= 0:
        raise HTTPException(status_code=422, detail="Donation amount must be positive")


@router.get("", response_model=DonationList)
async def list_donations(
    search: str | None = Query(None, max_length=500),
    person_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    min_amount: float | None = Query(None, ge=0),
    max_amount: float | None = Query(None, ge=0),
    page: Page = Depends(get_page),
    session: Session = Depends(get_session),
) -> DonationList:
    filters: dict[str, object] = {}
    if person_id is not None:
        filters["person_id"] = person_id
    if date_from or date_to:
        filters["donation_date"] = Range(date_from, date_to)
    if min_amount is not None or max_amount is not None:
        filters["donation_amount"] = Range(min_amount, max_amount)

    rows = search_records(
        session, Collection.DONATIONS, filters, search, skip=page.skip, limit=page.limit
    )

    # Total covers every donation on record, not just the filtered page
    total = session.exec(
        select(func.coalesce(func.sum(Donation.donation_amount), 0))
    ).one()

    return DonationList(
        donations=[DonationRow.model_validate(row) for row in rows],
        total_amount=float(total),
    )


@router.get("/{donation_id}", response_model=DonationRow)
async def get_donation(
    donation_id: int,
    session: Session = Depends(get_session),
) -> DonationRow:
    result = session.exec(
        select(Donation, Person)
        .where(Donation.donation_id == donation_id)
        .where(Donation.person_id == Person.person_id)
    ).first()
    if not result:
        raise HTTPException(status_code=404, detail="Donation not found")

    donation, person = result
    return DonationRow(
        donation_id=donation.donation_id,
        person_id=donation.person_id,
        donation_date=donation.donation_date,
        donation_amount=donation.donation_amount,
        first_name=person.first_name,
        last_name=person.last_name,
        email=person.email,
    )

@router.post("", response_model=DonationRead, status_code=201)
async def create_donation(
    body: DonationCreate,
    session: Session = Depends(get_session),
) -> DonationRead:
    _get_person(body.person_id, session)
    _check_amount(body.donation_amount)

    donation = Donation(
        person_id=body.person_id,
        donation_date=body.donation_date or date.today(),
        donation_amount=body.donation_amount,
    )
    session.add(donation)
    session.commit()
    session.refresh(donation)
    logger.info("Recorded donation %s for person %s", donation.donation_id, body.person_id)
    return DonationRead.model_validate(donation)


@router.post("/public", response_model=DonationRead, status_code=201)
async def create_public_donation(
    body: PublicDonation,
    session: Session = Depends(get_session),
) -> DonationRead:
    """Take a gift from a visitor, creating a donor record for a new email."""
    email = body.email.strip()
    first_name = body.first_name.strip()
    last_name = body.last_name.strip()
    if not email or not first_name or not last_name:
        raise HTTPException(status_code=422, detail="Name and email are required")
    _check_amount(body.donation_amount)

    person = session.exec(select(Person).where(Person.email == email)).first()
    if person is None:
        person = Person(
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=body.phone,
            role=DONOR_ROLE,
        )
        session.add(person)
        session.flush()
        logger.info("Created donor %s from public donation", person.person_id)

    donation = Donation(
        person_id=person.person_id,
        donation_date=date.today(),
        donation_amount=body.donation_amount,
    )
    session.add(donation)
    session.commit()
    session.refresh(donation)
    return DonationRead.model_validate(donation)


@router.patch("/{donation_id}", response_model=DonationRead)
async def update_donation(
    donation_id: int,
    body: DonationUpdate,
    session: Session = Depends(get_session),
) -> DonationRead:
    donation = _get_donation(donation_id, session)

    update_data = body.model_dump(exclude_unset=True)
    if update_data.get("person_id") is not None:
        _get_person(update_data["person_id"], session)
    elif "person_id" in update_data:
        raise HTTPException(status_code=422, detail="A donation needs a donor")
    if "donation_amount" in update_data:
        if update_data["donation_amount"] is None:
            raise HTTPException(status_code=422, detail="Donation amount is required")
        _check_amount(update_data["donation_amount"])

    for key, value in update_data.items():
        setattr(donation, key, value)

    session.add(donation)
    session.commit()
    session.refresh(donation)
    return DonationRead.model_validate(donation)


@router.delete("/{donation_id}", status_code=204)
async def delete_donation(
    donation_id: int,
    session: Session = Depends(get_session),
) -> None:
    donation = _get_donation(donation_id, session)
    session.delete(donation)
    session.commit()
    logger.info("Deleted donation %s", donation_id)

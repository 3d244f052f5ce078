"""Searchable collections and the SQL fragments that back them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Collection(str, Enum):
    PARTICIPANTS = "participants"
    EVENTS = "events"
    SURVEYS = "surveys"
    MILESTONES = "milestones"
    DONATIONS = "donations"


@dataclass(frozen=True, slots=True)
class CollectionSpec:
    """Static description of one collection.

    ``text_columns`` are coalesced and concatenated into the searchable
    text, followed by ``id_columns`` cast to text. ``filters`` maps the
    public filter name to the column it compares. ``order_by`` must end in
    the identifier columns so that results are stable.
    """
    collection: Collection
    select: str
    text_columns: tuple[str, ...]
    id_columns: tuple[str, ...]
    order_by: tuple[str, ...]
    filters: dict[str, str] = field(default_factory=dict)
    fixed_predicates: tuple[str, ...] = ()


PARTICIPANTS = CollectionSpec(
    collection=Collection.PARTICIPANTS,
    select=(
        "SELECT person_id, email, first_name, last_name, role, phone, city, state,\n"
        "       school_or_employer, field_of_interest\n"
        "FROM person"
    ),
    text_columns=(
        "first_name",
        "last_name",
        "email",
        "phone",
        "city",
        "state",
        "school_or_employer",
        "field_of_interest",
    ),
    id_columns=("person_id",),
    order_by=("last_name", "first_name", "person_id"),
    filters={
        "role": "role",
        "city": "city",
        "state": "state",
        "field_of_interest": "field_of_interest",
    },
)

EVENTS = CollectionSpec(
    collection=Collection.EVENTS,
    select=(
        "SELECT e.event_id, e.event_name, e.event_type, e.event_description,\n"
        "       e.event_recurrence_pattern, e.event_default_capacity,\n"
        "       (SELECT COUNT(*) FROM event_occurrence eo\n"
        "        WHERE eo.event_id = e.event_id) AS occurrence_count\n"
        "FROM event e"
    ),
    text_columns=(
        "e.event_name",
        "e.event_type",
        "e.event_description",
        "e.event_recurrence_pattern",
    ),
    id_columns=("e.event_id",),
    order_by=("e.event_name", "e.event_id"),
    filters={
        "event_type": "e.event_type",
        "capacity": "e.event_default_capacity",
    },
)

SURVEYS = CollectionSpec(
    collection=Collection.SURVEYS,
    select=(
        "SELECT r.person_id, r.event_occurrence_id,\n"
        "       r.survey_satisfaction_score, r.survey_usefulness_score,\n"
        "       r.survey_instructor_score, r.survey_recommendation_score,\n"
        "       r.survey_overall_score, r.survey_comments, r.survey_submission_date,\n"
        "       p.first_name, p.last_name, p.email,\n"
        "       e.event_id, e.event_name, eo.event_datetime_start\n"
        "FROM registration r\n"
        "JOIN person p ON r.person_id = p.person_id\n"
        "JOIN event_occurrence eo ON r.event_occurrence_id = eo.event_occurrence_id\n"
        "JOIN event e ON eo.event_id = e.event_id"
    ),
    text_columns=("p.first_name", "p.last_name", "p.email", "e.event_name"),
    id_columns=("r.person_id", "r.event_occurrence_id"),
    order_by=(
        "r.survey_submission_date DESC",
        "r.person_id",
        "r.event_occurrence_id",
    ),
    filters={
        "event_id": "e.event_id",
        "person_id": "r.person_id",
        "occurrence_id": "r.event_occurrence_id",
        "overall_score": "r.survey_overall_score",
    },
    fixed_predicates=("r.survey_submission_date IS NOT NULL",),
)

MILESTONES = CollectionSpec(
    collection=Collection.MILESTONES,
    select=(
        "SELECT m.person_id, m.milestone_no, m.milestone_title, m.milestone_date,\n"
        "       p.first_name, p.last_name, p.email\n"
        "FROM milestone m\n"
        "JOIN person p ON m.person_id = p.person_id"
    ),
    text_columns=("p.first_name", "p.last_name", "p.email", "m.milestone_title"),
    id_columns=("m.person_id",),
    order_by=(
        "m.milestone_date DESC",
        "p.last_name",
        "m.person_id",
        "m.milestone_no",
    ),
    filters={
        "person_id": "m.person_id",
        "milestone_date": "m.milestone_date",
    },
)

DONATIONS = CollectionSpec(
    collection=Collection.DONATIONS,
    select=(
        "SELECT d.donation_id, d.person_id, d.donation_date, d.donation_amount,\n"
        "       p.first_name, p.last_name, p.email\n"
        "FROM donation d\n"
        "JOIN person p ON d.person_id = p.person_id"
    ),
    text_columns=("p.first_name", "p.last_name", "p.email"),
    id_columns=("d.donation_id",),
    order_by=("d.donation_date DESC", "d.donation_id"),
    filters={
        "person_id": "d.person_id",
        "donation_date": "d.donation_date",
        "donation_amount": "d.donation_amount",
    },
)

COLLECTIONS: dict[Collection, CollectionSpec] = {
    spec.collection: spec
    for spec in (PARTICIPANTS, EVENTS, SURVEYS, MILESTONES, DONATIONS)
}

"""Tests for survey search, detail, submission and upkeep."""
from __future__ import annotations

from sqlmodel import Session

from ellarises.models.event import Registration


def _respondents(resp) -> list[str]:
    assert resp.status_code == 200
    return [s["first_name"] for s in resp.json()]


def test_list_only_submitted_surveys_newest_first(client, registrations):
    resp = client.get("/api/surveys")
    # Mariana registered but never submitted a survey
    assert _respondents(resp) == ["Ana", "Jane", "Maria"]


def test_rows_carry_event_and_scores(client, registrations):
    data = client.get("/api/surveys").json()
    ana = data[0]
    assert ana["event_name"] == "Art Night"
    assert ana["survey_overall_score"] == 4.5
    assert ana["survey_submission_date"].startswith("2024-03-02")


def test_search_by_event_name(client, registrations):
    resp = client.get("/api/surveys", params={"search": "robotics"})
    assert _respondents(resp) == ["Jane", "Maria"]


def test_search_person_and_event(client, registrations):
    resp = client.get("/api/surveys", params={"search": "Ana ART"})
    assert _respondents(resp) == ["Ana"]


def test_search_does_not_reach_unsubmitted(client, registrations):
    resp = client.get("/api/surveys", params={"search": "mariana"})
    assert _respondents(resp) == []


def test_filter_by_event(client, events, registrations):
    resp = client.get("/api/surveys", params={"event_id": events["robotics"].event_id})
    assert _respondents(resp) == ["Jane", "Maria"]


def test_filter_by_score_range(client, registrations):
    resp = client.get("/api/surveys", params={"min_score": 4})
    assert _respondents(resp) == ["Ana", "Maria"]

    resp = client.get("/api/surveys", params={"max_score": 3.5})
    assert _respondents(resp) == ["Jane"]


def test_get_survey(client, people, occurrences, registrations):
    person_id = people["maria"].person_id
    occurrence_id = occurrences["robotics_jan"].event_occurrence_id
    resp = client.get(f"/api/surveys/{person_id}/{occurrence_id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["survey_comments"] == "Loved it"
    assert data["event_name"] == "Robotics Workshop"


def test_get_unsubmitted_survey_is_not_found(client, people, occurrences, registrations):
    person_id = people["mariana"].person_id
    occurrence_id = occurrences["art_mar"].event_occurrence_id
    assert client.get(f"/api/surveys/{person_id}/{occurrence_id}").status_code == 404


def test_get_survey_not_found(client):
    assert client.get("/api/surveys/9999/9999").status_code == 404


# --- Submit / update / delete ---


def test_submit_survey_computes_overall_score(client, people, occurrences, registrations):
    body = {
        "person_id": people["mariana"].person_id,
        "event_occurrence_id": occurrences["art_mar"].event_occurrence_id,
        "survey_satisfaction_score": 4,
        "survey_usefulness_score": 5,
        "survey_recommendation_score": 3,
        "survey_comments": "Fun night",
    }
    resp = client.post("/api/surveys", json=body)
    assert resp.status_code == 201
    data = resp.json()
    assert data["survey_overall_score"] == 4.0
    assert data["survey_instructor_score"] is None
    assert data["survey_comments"] == "Fun night"
    assert data["event_name"] == "Art Night"
    assert data["survey_submission_date"]

    # Newest submission now leads the list
    assert _respondents(client.get("/api/surveys")) == ["Mariana", "Ana", "Jane", "Maria"]


def test_submit_survey_without_registration(client, people, occurrences, registrations):
    body = {
        "person_id": people["maria"].person_id,
        "event_occurrence_id": occurrences["art_mar"].event_occurrence_id,
        "survey_satisfaction_score": 5,
    }
    assert client.post("/api/surveys", json=body).status_code == 404


def test_submit_survey_score_out_of_range(client, people, occurrences, registrations):
    body = {
        "person_id": people["mariana"].person_id,
        "event_occurrence_id": occurrences["art_mar"].event_occurrence_id,
        "survey_satisfaction_score": 6,
    }
    assert client.post("/api/surveys", json=body).status_code == 422


def test_update_survey_recomputes_overall_score(client, people, occurrences, registrations):
    person_id = people["maria"].person_id
    occurrence_id = occurrences["robotics_jan"].event_occurrence_id

    resp = client.patch(
        f"/api/surveys/{person_id}/{occurrence_id}",
        json={"survey_satisfaction_score": 1},
    )
    assert resp.status_code == 200
    data = resp.json()
    # (1 + 4 + 5 + 4) / 4
    assert data["survey_overall_score"] == 3.5
    assert data["survey_comments"] == "Loved it"
    assert data["survey_submission_date"].startswith("2024-01-16")


def test_update_unsubmitted_survey_is_not_found(client, people, occurrences, registrations):
    person_id = people["mariana"].person_id
    occurrence_id = occurrences["art_mar"].event_occurrence_id
    resp = client.patch(
        f"/api/surveys/{person_id}/{occurrence_id}", json={"survey_comments": "x"}
    )
    assert resp.status_code == 404


def test_delete_survey_keeps_registration(
    client, session: Session, people, occurrences, registrations
):
    person_id = people["ana"].person_id
    occurrence_id = occurrences["art_mar"].event_occurrence_id

    resp = client.delete(f"/api/surveys/{person_id}/{occurrence_id}")
    assert resp.status_code == 204
    assert client.get(f"/api/surveys/{person_id}/{occurrence_id}").status_code == 404
    assert _respondents(client.get("/api/surveys")) == ["Jane", "Maria"]

    registration = session.get(Registration, (person_id, occurrence_id))
    assert registration is not None
    assert registration.survey_overall_score is None
    assert registration.survey_satisfaction_score is None

    # A second delete finds nothing to clear
    assert client.delete(f"/api/surveys/{person_id}/{occurrence_id}").status_code == 404

from __future__ import annotations


def test_dashboard_counts(client, people, events, registrations, donations):
    resp = client.get("/api/dashboard")
    assert resp.status_code == 200
    # Donor and staff records are not counted as participants
    assert resp.json() == {
        "participants": 4,
        "events": 3,
        "registrations": 4,
        "donations": 3,
    }


def test_dashboard_counts_on_empty_database(client):
    resp = client.get("/api/dashboard")
    assert resp.json() == {"participants": 0, "events": 0, "registrations": 0, "donations": 0}

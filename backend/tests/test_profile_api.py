"""
Tests for profile, identity and health endpoints.
"""
from app.models import Profile

from tests.conftest import USER_ID


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_me_without_profile(client, db_session, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "user_id": USER_ID,
        "email": f"{USER_ID}@example.com",
        "profile": None,
    }


def test_put_profile_creates_row(client, db_session, auth_headers):
    response = client.put(
        "/api/v1/profile",
        json={"full_name": "Ada Runner", "bio": "Weekend long runs"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Ada Runner"
    assert body["email"] == f"{USER_ID}@example.com"
    assert body["all_time_stats"]["total_activities"] == 0

    me = client.get("/api/v1/auth/me", headers=auth_headers).json()
    assert me["profile"]["full_name"] == "Ada Runner"


def test_put_profile_keeps_stats(client, db_session, profile, auth_headers):
    client.post(
        "/api/v1/activity",
        json={"type": "ride", "distance_km": 20, "duration_min": 60, "title": "Commute"},
        headers=auth_headers,
    )

    response = client.put("/api/v1/profile", json={"bio": "Cyclist"}, headers=auth_headers)

    stats = response.json()["all_time_stats"]
    assert stats["total_distance"] == 20
    assert stats["avg_speed"] == 20
    assert response.json()["bio"] == "Cyclist"


def test_get_profile_not_found(client, db_session, auth_headers):
    response = client.get("/api/v1/profile", headers=auth_headers)
    assert response.status_code == 404


def test_rebuild_stats(client, db_session, profile, add_activity, auth_headers):
    add_activity(distance_km=5, duration_min=30)
    add_activity(distance_km=8, duration_min=40)

    stale = db_session.get(Profile, USER_ID)
    assert stale.total_activities == 0

    response = client.post("/api/v1/profile/stats/rebuild", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["all_time_stats"] == {
        "total_activities": 2,
        "total_distance": 13,
        "total_duration": 70,
        "avg_speed": 11,
        "longest_run": 8,
    }

"""
Integration tests for the activity endpoints.
"""
from datetime import datetime

from tests.conftest import OTHER_USER_ID


RUN = {"type": "run", "distance_km": 5, "duration_min": 30, "title": "Park Run"}


def _profile_stats(client, headers):
    response = client.get("/api/v1/profile", headers=headers)
    assert response.status_code == 200
    return response.json()["all_time_stats"]


class TestCreateActivity:
    def test_create_updates_profile(self, client, profile, auth_headers):
        response = client.post("/api/v1/activity", json=RUN, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Park Run"
        assert body["user_id"] == profile.id

        stats = _profile_stats(client, auth_headers)
        assert stats == {
            "total_activities": 1,
            "total_distance": 5,
            "total_duration": 30,
            "avg_speed": 10,
            "longest_run": 5,
        }

    def test_zero_duration_rejected_before_stats(self, client, profile, auth_headers):
        response = client.post(
            "/api/v1/activity",
            json={**RUN, "duration_min": 0},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert _profile_stats(client, auth_headers)["total_activities"] == 0

    def test_invalid_payloads(self, client, profile, auth_headers):
        for payload in (
            {**RUN, "type": "swim"},
            {**RUN, "distance_km": -1},
            {**RUN, "title": ""},
            {**RUN, "notes": "x" * 501},
        ):
            response = client.post("/api/v1/activity", json=payload, headers=auth_headers)
            assert response.status_code == 422, payload

    def test_requires_identity(self, client, profile):
        response = client.post("/api/v1/activity", json=RUN)
        assert response.status_code == 401

    def test_bad_token(self, client, profile):
        response = client.post(
            "/api/v1/activity",
            json=RUN,
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_missing_profile_is_not_found(self, client, other_auth_headers):
        response = client.post("/api/v1/activity", json=RUN, headers=other_auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found"


class TestUpdateActivity:
    def test_patch_recomputes_stats(self, client, profile, auth_headers):
        created = client.post("/api/v1/activity", json=RUN, headers=auth_headers).json()

        response = client.patch(
            f"/api/v1/activity/{created['id']}",
            json={"distance_km": 3},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["distance_km"] == 3
        stats = _profile_stats(client, auth_headers)
        assert stats["longest_run"] == 3
        assert stats["avg_speed"] == 6

    def test_patch_validates(self, client, profile, auth_headers):
        created = client.post("/api/v1/activity", json=RUN, headers=auth_headers).json()

        response = client.patch(
            f"/api/v1/activity/{created['id']}",
            json={"duration_min": 0},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_patch_foreign_activity(self, client, profile, other_profile, add_activity, auth_headers):
        foreign = add_activity(user_id=OTHER_USER_ID)

        response = client.patch(
            f"/api/v1/activity/{foreign.id}",
            json={"distance_km": 1},
            headers=auth_headers,
        )

        assert response.status_code == 404


class TestDeleteActivity:
    def test_delete_then_delete_again(self, client, profile, auth_headers):
        keep = client.post("/api/v1/activity", json=RUN, headers=auth_headers).json()
        gone = client.post(
            "/api/v1/activity",
            json={**RUN, "distance_km": 8, "duration_min": 40, "title": "Long Run"},
            headers=auth_headers,
        ).json()

        first = client.delete(f"/api/v1/activity/{gone['id']}", headers=auth_headers)
        second = client.delete(f"/api/v1/activity/{gone['id']}", headers=auth_headers)

        assert first.status_code == 200
        assert first.json() == {"ok": True, "id": gone["id"]}
        assert second.status_code == 404
        stats = _profile_stats(client, auth_headers)
        assert stats["longest_run"] == 5
        assert stats["total_distance"] == 5
        assert stats["total_activities"] == 1

        assert client.get(f"/api/v1/activity/{keep['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/v1/activity/{gone['id']}", headers=auth_headers).status_code == 404


class TestListActivities:
    def test_filters_and_pagination(self, client, profile, other_profile, add_activity, auth_headers):
        add_activity(title="City Loop", created_at=datetime(2025, 8, 1, 7))
        add_activity(title="Park Run", created_at=datetime(2025, 8, 2, 7))
        add_activity(title="Trail Ride", type="ride", created_at=datetime(2025, 8, 3, 7))
        add_activity(title="Old Run", deleted=True, created_at=datetime(2025, 8, 4, 7))
        add_activity(user_id=OTHER_USER_ID, title="Their Run")

        everything = client.get("/api/v1/activities", headers=auth_headers).json()
        assert everything["total"] == 3
        assert [a["title"] for a in everything["items"]] == ["Trail Ride", "Park Run", "City Loop"]

        searched = client.get("/api/v1/activities", params={"search": "run"}, headers=auth_headers).json()
        assert [a["title"] for a in searched["items"]] == ["Park Run"]

        rides = client.get("/api/v1/activities", params={"sport": "ride"}, headers=auth_headers).json()
        assert rides["total"] == 1

        window = client.get(
            "/api/v1/activities",
            params={"from": "2025-08-02T00:00:00", "to": "2025-08-02T23:59:59"},
            headers=auth_headers,
        ).json()
        assert [a["title"] for a in window["items"]] == ["Park Run"]

        page_two = client.get(
            "/api/v1/activities",
            params={"page": 2, "pageSize": 2},
            headers=auth_headers,
        ).json()
        assert page_two["total"] == 3
        assert page_two["page"] == 2
        assert [a["title"] for a in page_two["items"]] == ["City Loop"]

    def test_unknown_sport_rejected(self, client, profile, auth_headers):
        response = client.get("/api/v1/activities", params={"sport": "swim"}, headers=auth_headers)
        assert response.status_code == 422


class TestNonFiniteNumbers:
    RAW_INFINITE_DISTANCE = (
        '{"type": "run", "distance_km": Infinity, "duration_min": 30, "title": "Endless"}'
    )

    def _post_raw(self, client, body, headers, method="POST", url="/api/v1/activity"):
        return client.request(
            method,
            url,
            content=body,
            headers={**headers, "Content-Type": "application/json"},
        )

    def test_infinite_distance_rejected(self, client, profile, auth_headers):
        response = self._post_raw(client, self.RAW_INFINITE_DISTANCE, auth_headers)

        assert response.status_code == 422
        assert _profile_stats(client, auth_headers)["total_distance"] == 0

    def test_nan_duration_rejected(self, client, profile, auth_headers):
        body = '{"type": "ride", "distance_km": 10, "duration_min": NaN, "title": "Broken"}'

        response = self._post_raw(client, body, auth_headers)

        assert response.status_code == 422

    def test_infinite_patch_rejected(self, client, profile, auth_headers):
        created = client.post("/api/v1/activity", json=RUN, headers=auth_headers).json()

        response = self._post_raw(
            client,
            '{"distance_km": Infinity}',
            auth_headers,
            method="PATCH",
            url=f"/api/v1/activity/{created['id']}",
        )

        assert response.status_code == 422
        stats = _profile_stats(client, auth_headers)
        assert stats["total_distance"] == 5
        assert stats["longest_run"] == 5


class TestSearchIsLiteral:
    def test_wildcard_characters_match_literally(self, client, profile, add_activity, auth_headers):
        add_activity(title="Morning Run")
        add_activity(title="Evening Ride")
        add_activity(title="100% effort")
        add_activity(title="hill_repeats")

        def titles(search):
            body = client.get("/api/v1/activities", params={"search": search}, headers=auth_headers).json()
            return sorted(a["title"] for a in body["items"])

        assert titles("_") == ["hill_repeats"]
        assert titles("%") == ["100% effort"]
        assert titles("0%") == ["100% effort"]
        assert titles("\\") == []
        assert titles("MORNING") == ["Morning Run"]

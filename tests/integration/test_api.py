"""
API tests through the FastAPI test client over the in-memory store.
"""

import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from conftest import HOUSEHOLD_ID, OTHER_WORKER_ID, WORKER_ID

pytestmark = pytest.mark.integration

API = "/api/v1"


def _as(user_id):
    return {"X-Actor-Id": user_id}


def _job_payload(**overrides):
    payload = {
        "title": "House cleaning help",
        "service_type": "cleaning",
        "description": "Weekly cleaning of a 3 bedroom house",
        "schedule": "Mon-Fri 8am-5pm",
        "salary": 5000,
        "pay_frequency": "monthly",
        "household_name": "The Mugisha Family",
        "benefits": {"meals": True},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def job_id(client):
    response = client.post(f"{API}/jobs", json=_job_payload(), headers=_as(HOUSEHOLD_ID))
    assert response.status_code == 201
    return response.json()["job"]["id"]


@pytest.fixture
def assigned_job_id(client, job_id):
    client.post(
        f"{API}/jobs/{job_id}/applications",
        json={"worker_name": "Alice"},
        headers=_as(WORKER_ID),
    )
    response = client.post(
        f"{API}/jobs/{job_id}/assign", json={"worker_id": WORKER_ID}, headers=_as(HOUSEHOLD_ID)
    )
    assert response.status_code == 200
    return job_id


class TestJobEndpoints:
    def test_create_job_defaults_household_to_actor(self, client):
        response = client.post(f"{API}/jobs", json=_job_payload(), headers=_as(HOUSEHOLD_ID))

        assert response.status_code == 201
        data = response.json()
        assert data["warnings"] == []
        assert data["job"]["status"] == "open"
        assert data["job"]["household_id"] == HOUSEHOLD_ID
        assert data["job"]["benefits"] == {
            "accommodation": False,
            "meals": True,
            "transportation": False,
        }

    def test_create_job_requires_actor(self, client):
        response = client.post(f"{API}/jobs", json=_job_payload())

        assert response.status_code == 401
        assert response.json()["type"] == "http_error"

    def test_create_job_validation(self, client):
        response = client.post(
            f"{API}/jobs", json=_job_payload(title="Hi"), headers=_as(HOUSEHOLD_ID)
        )

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert "Title must be at least 5 characters" in body["message"]

    def test_create_job_rejects_nan_salary(self, client):
        body = json.dumps(_job_payload(salary=float("nan")))

        response = client.post(
            f"{API}/jobs",
            content=body,
            headers={**_as(HOUSEHOLD_ID), "Content-Type": "application/json"},
        )

        assert "NaN" in body
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_malformed_body(self, client):
        response = client.post(
            f"{API}/jobs", json={"title": "House cleaning help"}, headers=_as(HOUSEHOLD_ID)
        )

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_get_job_counts_views(self, client, job_id):
        client.get(f"{API}/jobs/{job_id}")
        response = client.get(f"{API}/jobs/{job_id}")

        assert response.status_code == 200
        assert response.json()["view_count"] == 2

    def test_get_unknown_job(self, client):
        response = client.get(f"{API}/jobs/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    def test_list_jobs_by_status(self, client, job_id, assigned_job_id):
        client.post(f"{API}/jobs", json=_job_payload(), headers=_as(HOUSEHOLD_ID))

        open_jobs = client.get(f"{API}/jobs", params={"status": "open"}).json()
        assigned = client.get(f"{API}/jobs", params={"status": "assigned"}).json()

        assert len(open_jobs["items"]) == 1
        assert [j["id"] for j in assigned["items"]] == [assigned_job_id]
        assert client.get(f"{API}/jobs", params={"status": "bogus"}).status_code == 400

    def test_worker_journey(self, client, assigned_job_id):
        eta = (datetime.now(timezone.utc) + timedelta(minutes=25)).isoformat()

        on_way = client.post(
            f"{API}/jobs/{assigned_job_id}/eta",
            json={"eta": eta, "location": {"latitude": -1.95, "longitude": 30.06}},
            headers=_as(WORKER_ID),
        )
        arrived = client.post(f"{API}/jobs/{assigned_job_id}/arrival", headers=_as(WORKER_ID))
        started = client.post(f"{API}/jobs/{assigned_job_id}/start", headers=_as(WORKER_ID))
        completed = client.post(f"{API}/jobs/{assigned_job_id}/complete", headers=_as(WORKER_ID))

        assert on_way.json()["job"]["status"] == "on_way"
        assert on_way.json()["job"]["current_location"]["latitude"] == -1.95
        assert arrived.json()["job"]["status"] == "arrived"
        assert started.json()["job"]["status"] == "in_progress"
        assert completed.status_code == 200
        assert completed.json()["job"]["status"] == "completed"
        assert completed.json()["job"]["worker_id"] == WORKER_ID

    def test_invalid_transition_response(self, client, job_id):
        response = client.post(f"{API}/jobs/{job_id}/complete", headers=_as(HOUSEHOLD_ID))

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "invalid_transition"
        assert body["current_status"] == "open"
        assert body["required_statuses"] == ["in_progress"]

    def test_eta_in_the_past(self, client, assigned_job_id):
        eta = (datetime.now(timezone.utc) - timedelta(hours=2)).isoformat()

        response = client.post(
            f"{API}/jobs/{assigned_job_id}/eta", json={"eta": eta}, headers=_as(WORKER_ID)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "ETA cannot be in the past"

    def test_cancel_with_reason(self, client, assigned_job_id):
        response = client.post(
            f"{API}/jobs/{assigned_job_id}/cancel",
            json={"reason": "Plans changed"},
            headers=_as(HOUSEHOLD_ID),
        )

        assert response.status_code == 200
        assert response.json()["job"]["status"] == "cancelled"
        assert response.json()["job"]["worker_id"] is None

        notifications = client.get(
            f"{API}/notifications", params={"user_id": WORKER_ID}
        ).json()
        assert [n["title"] for n in notifications["items"]] == ["Job Cancelled"]


class TestApplicationEndpoints:
    def test_apply_and_list(self, client, job_id):
        response = client.post(
            f"{API}/jobs/{job_id}/applications",
            json={"worker_name": "Alice", "proposed_rate": 4500},
            headers=_as(WORKER_ID),
        )
        client.post(
            f"{API}/jobs/{job_id}/applications",
            json={"worker_name": "Bob"},
            headers=_as(OTHER_WORKER_ID),
        )

        assert response.status_code == 201
        assert response.json()["application"]["status"] == "pending"
        applications = client.get(f"{API}/jobs/{job_id}/applications").json()["items"]
        assert [a["worker_id"] for a in applications] == [WORKER_ID, OTHER_WORKER_ID]

    def test_duplicate_application(self, client, job_id):
        payload = {"worker_name": "Alice"}
        client.post(f"{API}/jobs/{job_id}/applications", json=payload, headers=_as(WORKER_ID))

        response = client.post(
            f"{API}/jobs/{job_id}/applications", json=payload, headers=_as(WORKER_ID)
        )

        assert response.status_code == 400
        assert response.json()["type"] == "duplicate_application"

    def test_apply_to_assigned_job(self, client, assigned_job_id):
        response = client.post(
            f"{API}/jobs/{assigned_job_id}/applications",
            json={"worker_name": "Bob"},
            headers=_as(OTHER_WORKER_ID),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Job is no longer accepting applications"


class TestNotificationEndpoints:
    def test_list_and_mark_read(self, client, job_id):
        client.post(
            f"{API}/jobs/{job_id}/applications",
            json={"worker_name": "Alice"},
            headers=_as(WORKER_ID),
        )

        page = client.get(f"{API}/notifications", params={"user_id": HOUSEHOLD_ID}).json()
        assert page["unread_count"] == 1
        [notification] = page["items"]
        assert notification["title"] == "New Job Application"
        assert notification["type"] == "job_application"

        # Someone else cannot see or flip it
        hidden = client.put(
            f"{API}/notifications/{notification['id']}/read", headers=_as(WORKER_ID)
        )
        assert hidden.status_code == 404

        marked = client.put(
            f"{API}/notifications/{notification['id']}/read", headers=_as(HOUSEHOLD_ID)
        )
        assert marked.status_code == 200
        assert marked.json()["read"] is True

        page = client.get(f"{API}/notifications", params={"user_id": HOUSEHOLD_ID}).json()
        assert page["unread_count"] == 0

    def test_mark_all_read(self, client, job_id):
        for worker in (WORKER_ID, OTHER_WORKER_ID):
            client.post(
                f"{API}/jobs/{job_id}/applications",
                json={"worker_name": worker},
                headers=_as(worker),
            )

        response = client.post(
            f"{API}/notifications/read", json={"mark_all": True}, headers=_as(HOUSEHOLD_ID)
        )

        assert response.json() == {"updated": 2}

    def test_mark_read_needs_a_target(self, client):
        response = client.post(f"{API}/notifications/read", json={}, headers=_as(HOUSEHOLD_ID))

        assert response.status_code == 400


class TestMessageEndpoints:
    def test_conversation_flow(self, client):
        sent = client.post(
            f"{API}/messages",
            json={"receiver_id": WORKER_ID, "content": "Can you start on Monday?"},
            headers=_as(HOUSEHOLD_ID),
        )
        client.post(
            f"{API}/messages",
            json={"receiver_id": HOUSEHOLD_ID, "content": "Yes, see you then"},
            headers=_as(WORKER_ID),
        )

        assert sent.status_code == 201
        conversation_id = sent.json()["conversation"]["id"]
        assert sent.json()["conversation"]["other_participant"] == WORKER_ID

        by_pair = client.get(
            f"{API}/messages", params={"sender_id": WORKER_ID, "receiver_id": HOUSEHOLD_ID}
        ).json()
        assert by_pair["conversation_id"] == conversation_id
        assert [m["content"] for m in by_pair["items"]] == [
            "Can you start on Monday?",
            "Yes, see you then",
        ]

        conversations = client.get(
            f"{API}/conversations", params={"user_id": HOUSEHOLD_ID}
        ).json()["items"]
        assert conversations[0]["unread_count"] == 1

        read = client.post(
            f"{API}/conversations/{conversation_id}/read", headers=_as(HOUSEHOLD_ID)
        )
        assert read.json()["updated"] == 1

    def test_list_messages_needs_conversation(self, client):
        response = client.get(f"{API}/messages", params={"sender_id": WORKER_ID})

        assert response.status_code == 400


class TestAccountEndpoints:
    def test_successful_payment_notifies_worker(self, client):
        payload = {
            "payment_id": "pay-77",
            "worker_id": WORKER_ID,
            "amount": 30000,
            "household_name": "The Mugisha Family",
            "status": "SUCCESSFUL",
        }

        first = client.post(f"{API}/webhooks/payments", json=payload)
        client.post(f"{API}/webhooks/payments", json=payload)

        assert first.json()["event_type"] == "payment_completed"
        page = client.get(f"{API}/notifications", params={"user_id": WORKER_ID}).json()
        assert page["unread_count"] == 1
        assert page["items"][0]["description"] == (
            "You have received a payment of 30000 RWF from The Mugisha Family."
        )

    def test_failed_payment_is_ignored(self, client):
        response = client.post(
            f"{API}/webhooks/payments",
            json={"payment_id": "pay-78", "worker_id": WORKER_ID, "amount": 100, "status": "failed"},
        )

        assert response.status_code == 200
        assert response.json()["event_type"] is None
        assert response.json()["message"] == "Payment status 'failed' ignored"

    def test_admin_status_change(self, client):
        response = client.put(
            f"{API}/admin/users/{WORKER_ID}/status",
            json={"status": "inactive", "reason": "Requested"},
            headers=_as("admin-1"),
        )
        invalid = client.put(
            f"{API}/admin/users/{WORKER_ID}/status",
            json={"status": "banned"},
            headers=_as("admin-1"),
        )

        assert response.status_code == 200
        assert response.json()["event_type"] == "user_status_changed"
        assert invalid.status_code == 400


class TestHealthEndpoints:
    def test_liveness(self, client):
        response = client.get(f"{API}/health/live")

        assert response.status_code == 200

    def test_request_id_is_echoed(self, client):
        response = client.get(f"{API}/health/live", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers

    def test_overall_health_in_memory(self, client):
        response = client.get(f"{API}/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["services"]["store"]["backend"] == "memory"

    def test_metrics_exposed(self, client):
        client.get(f"{API}/health/live")

        response = client.get(f"{API}/health/metrics")

        assert response.status_code == 200
        assert "api_requests_total" in response.text

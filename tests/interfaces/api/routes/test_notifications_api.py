"""Integration tests for the notification endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from experience_hub.domain.entities import Notification, Role
from experience_hub.infrastructure.repositories import NotificationRepository
from experience_hub.utils import now_in_app_timezone


@pytest.fixture()
def client():
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_notification(session):
    def factory(user_id: str, title: str = "Hello") -> Notification:
        return NotificationRepository(session).create(
            Notification(
                id=None,
                user_id=user_id,
                title=title,
                message=f"{title} message",
                created_at=now_in_app_timezone(),
            )
        )

    return factory


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_list_and_summary(client, make_user, make_notification, token_for) -> None:
    student = make_user(Role.STUDENT)
    other = make_user(Role.STUDENT)
    for index in range(3):
        make_notification(student.id, f"N{index}")
    make_notification(other.id, "Not yours")
    headers = _auth(token_for(student))

    response = client.get("/notifications/", headers=headers)
    assert response.status_code == 200
    notifications = response.json()
    assert len(notifications) == 3
    assert {item["user_id"] for item in notifications} == {student.id}

    response = client.get("/notifications/", params={"limit": 2}, headers=headers)
    assert len(response.json()) == 2

    summary = client.get("/notifications/summary", headers=headers).json()
    assert summary["total"] == 3
    assert summary["unread"] == 3
    assert len(summary["recent"]) == 3


def test_bulk_mark_read_pushes_unread_count(
    client, make_user, make_notification, token_for
) -> None:
    student = make_user(Role.STUDENT)
    first = make_notification(student.id, "First")
    make_notification(student.id, "Second")
    token = token_for(student)

    with client.websocket_connect(f"/ws?token={token}") as websocket:
        websocket.receive_json()
        websocket.receive_json()

        response = client.post(
            "/notifications/read",
            json={"ids": [first.id, first.id, "unknown"]},
            headers=_auth(token),
        )
        assert response.status_code == 200
        assert response.json() == {"updated_count": 1}

        assert websocket.receive_json() == {
            "type": "notification:count:update",
            "data": {"unreadCount": 1},
        }

    unread = client.get(
        "/notifications/", params={"unread_only": True}, headers=_auth(token)
    ).json()
    assert [item["title"] for item in unread] == ["Second"]


def test_bulk_mark_read_validates_payload(client, make_user, token_for) -> None:
    headers = _auth(token_for(make_user(Role.STUDENT)))

    assert client.post("/notifications/read", json={"ids": []}, headers=headers).status_code == 422
    too_many = {"ids": [str(index) for index in range(101)]}
    assert client.post("/notifications/read", json=too_many, headers=headers).status_code == 422


def test_mark_single_notification(client, make_user, make_notification, token_for) -> None:
    student = make_user(Role.STUDENT)
    intruder = make_user(Role.STUDENT)
    notification = make_notification(student.id)

    response = client.patch(
        f"/notifications/{notification.id}/read", headers=_auth(token_for(intruder))
    )
    assert response.status_code == 404

    response = client.patch(
        f"/notifications/{notification.id}/read", headers=_auth(token_for(student))
    )
    assert response.status_code == 200
    body = response.json()
    assert body["is_read"] is True
    assert body["read_at"] is not None


def test_inactive_users_are_refused(client, make_user, token_for) -> None:
    inactive = make_user(Role.STUDENT, is_active=False)

    response = client.get("/notifications/", headers=_auth(token_for(inactive)))

    assert response.status_code == 400

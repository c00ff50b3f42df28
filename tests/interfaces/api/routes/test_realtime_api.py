"""Integration tests for the websocket endpoint and realtime administration."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from experience_hub.domain.entities import Role


@pytest.fixture()
def client():
    """Return a test client bound to a clean application instance."""

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_authenticated_connection_handshake(client, make_user, token_for) -> None:
    student = make_user(Role.STUDENT)

    with client.websocket_connect(f"/ws?token={token_for(student)}") as websocket:
        ready = websocket.receive_json()
        assert ready["type"] == "connection:ready"
        assert ready["data"]["authenticated"] is True

        assert websocket.receive_json() == {
            "type": "user:status:online",
            "data": {"isOnline": True},
        }

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_bearer_header_authenticates_the_socket(client, make_user, token_for) -> None:
    admin = make_user(Role.ADMIN)

    with client.websocket_connect("/ws", headers=_auth(token_for(admin))) as websocket:
        assert websocket.receive_json()["data"]["authenticated"] is True


def test_invalid_token_still_connects_anonymously(client) -> None:
    with client.websocket_connect("/ws?token=garbage") as websocket:
        ready = websocket.receive_json()
        assert ready["data"]["authenticated"] is False

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_malformed_frames_are_ignored(client, make_user, token_for) -> None:
    student = make_user(Role.STUDENT)

    with client.websocket_connect(f"/ws?token={token_for(student)}") as websocket:
        websocket.receive_json()
        websocket.receive_json()

        websocket.send_text("not json")
        websocket.send_json(["not", "an", "object"])
        websocket.send_json({"type": "no:such:event", "data": {}})
        websocket.send_json({"type": "notification:count"})

        assert websocket.receive_json() == {
            "type": "notification:count:update",
            "data": {"unreadCount": 0},
        }


def test_socket_events_round_trip(client, make_user, token_for) -> None:
    student = make_user(Role.STUDENT)
    other = make_user(Role.STUDENT)

    with client.websocket_connect(f"/ws?token={token_for(student)}") as websocket:
        websocket.receive_json()
        websocket.receive_json()

        websocket.send_json(
            {"type": "join-room", "data": {"userId": other.id, "role": "STUDENT"}}
        )
        assert websocket.receive_json() == {
            "type": "error",
            "data": {"message": "Invalid room data", "event": "join-room"},
        }


def test_stats_require_admin(client, make_user, token_for) -> None:
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT)

    response = client.get("/realtime/stats", headers=_auth(token_for(student)))
    assert response.status_code == 403

    with client.websocket_connect(f"/ws?token={token_for(student)}") as websocket:
        websocket.receive_json()
        response = client.get("/realtime/stats", headers=_auth(token_for(admin)))
        assert response.status_code == 200
        assert response.json()["connected"] >= 1


def test_online_members_of_an_organization(client, make_user, token_for) -> None:
    organization = make_user(Role.ORGANIZATION)
    student = make_user(Role.STUDENT)
    path = f"/realtime/organizations/{organization.organization.id}/online-members"

    with client.websocket_connect(f"/ws?token={token_for(organization)}") as websocket:
        websocket.receive_json()
        response = client.get(path, headers=_auth(token_for(organization)))
        assert response.status_code == 200
        assert response.json() == {
            "organization_id": organization.organization.id,
            "user_ids": [organization.id],
        }

    assert client.get(path, headers=_auth(token_for(student))).status_code == 403


def test_admin_can_force_disconnect(client, make_user, token_for) -> None:
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT)

    with client.websocket_connect(f"/ws?token={token_for(student)}") as websocket:
        websocket.receive_json()
        websocket.receive_json()

        response = client.post(
            f"/realtime/users/{student.id}/disconnect",
            json={"reason": "Account review"},
            headers=_auth(token_for(admin)),
        )
        assert response.status_code == 200
        assert response.json() == {"user_id": student.id, "closed": 1}

        with pytest.raises(WebSocketDisconnect) as excinfo:
            websocket.receive_json()
        assert excinfo.value.code == 1008


def test_rest_requires_credentials(client) -> None:
    assert client.get("/realtime/stats").status_code == 401

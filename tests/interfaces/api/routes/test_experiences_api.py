"""Integration tests for the experience verification endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from experience_hub.domain.entities import NotificationType, Role
from experience_hub.infrastructure.repositories import NotificationRepository


@pytest.fixture()
def client():
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_verification_notifies_student_and_organization(
    client, make_user, make_experience, token_for, session
) -> None:
    organization = make_user(Role.ORGANIZATION, name="Acme Labs")
    student = make_user(Role.STUDENT, name="Ana Diaz")
    experience = make_experience(organization, student, title="Data internship")

    with client.websocket_connect(f"/ws?token={token_for(student)}") as student_ws, \
            client.websocket_connect(f"/ws?token={token_for(organization)}") as org_ws:
        for websocket in (student_ws, org_ws):
            websocket.receive_json()
            websocket.receive_json()

        response = client.post(
            f"/experiences/{experience.id}/verification",
            json={"status": "APPROVED", "note": "Confirmed with supervisor"},
            headers=_auth(token_for(organization)),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "APPROVED"
        assert body["verified_by"] == organization.id
        assert body["verification_note"] == "Confirmed with supervisor"

        created = student_ws.receive_json()
        assert created["type"] == "notification:new"
        assert created["data"]["notification"]["type"] == "VERIFICATION"

        update = student_ws.receive_json()
        assert update["type"] == "experience:verification:update"
        assert update["data"]["status"] == "APPROVED"
        assert update["data"]["organizationName"] == "Acme Labs"

        assert org_ws.receive_json() == {
            "type": "experience:verified",
            "data": {
                "experienceId": experience.id,
                "studentName": "Ana Diaz",
                "status": "APPROVED",
            },
        }

    [stored] = NotificationRepository(session).list_for_user(student.id)
    assert stored.type == NotificationType.VERIFICATION
    assert stored.metadata == {"experienceId": experience.id, "status": "APPROVED"}


def test_other_organizations_are_forbidden(
    client, make_user, make_experience, token_for
) -> None:
    experience = make_experience(make_user(Role.ORGANIZATION), make_user(Role.STUDENT))
    intruder = make_user(Role.ORGANIZATION)

    response = client.post(
        f"/experiences/{experience.id}/verification",
        json={"status": "APPROVED"},
        headers=_auth(token_for(intruder)),
    )

    assert response.status_code == 403


def test_admin_may_verify_any_experience(
    client, make_user, make_experience, token_for
) -> None:
    experience = make_experience(make_user(Role.ORGANIZATION), make_user(Role.STUDENT))
    admin = make_user(Role.ADMIN)

    response = client.post(
        f"/experiences/{experience.id}/verification",
        json={"status": "REJECTED"},
        headers=_auth(token_for(admin)),
    )

    assert response.status_code == 200
    assert response.json()["verified_by"] is None


def test_unknown_experience_and_bad_status(client, make_user, token_for) -> None:
    headers = _auth(token_for(make_user(Role.ORGANIZATION)))

    response = client.post(
        "/experiences/missing/verification", json={"status": "APPROVED"}, headers=headers
    )
    assert response.status_code == 404

    response = client.post(
        "/experiences/missing/verification", json={"status": "MAYBE"}, headers=headers
    )
    assert response.status_code == 422

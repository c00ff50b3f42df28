"""Tests for the targeted fan-out façade."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone

import anyio
import pytest
from anyio import to_thread

from experience_hub.domain.entities import Role, VerificationStatus
from experience_hub.infrastructure.realtime import build_message, user_room

pytestmark = pytest.mark.anyio


@dataclass
class _Point:
    x: int
    y: int


def test_build_message_serializes_rich_values() -> None:
    moment = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    payload = {
        "at": moment,
        "status": VerificationStatus.APPROVED,
        "points": [_Point(1, 2)],
    }

    message = build_message("demo", payload)

    assert message == {
        "type": "demo",
        "data": {
            "at": "2024-05-01T12:30:00+00:00",
            "status": "APPROVED",
            "points": [{"x": 1, "y": 2}],
        },
    }
    assert payload["at"] is moment


async def test_send_to_user_reaches_every_tab(services, connect, make_user) -> None:
    student = make_user(Role.STUDENT)
    _, first_tab = await connect(student)
    _, second_tab = await connect(student)
    _, stranger = await connect(make_user(Role.STUDENT))

    delivered = await services.broadcaster.send_to_user(student.id, "ping:me", {"n": 1})

    assert delivered == 2
    assert first_tab.of_type("ping:me") == [{"n": 1}]
    assert second_tab.of_type("ping:me") == [{"n": 1}]
    assert stranger.messages == []


async def test_scoped_sends(services, connect, make_user) -> None:
    organization = make_user(Role.ORGANIZATION)
    student = make_user(Role.STUDENT)
    admin = make_user(Role.ADMIN)
    _, org_socket = await connect(organization)
    _, student_socket = await connect(student)
    _, admin_socket = await connect(admin)
    _, anonymous_socket = await connect()

    await services.broadcaster.send_to_organization(organization.organization.id, "org", {})
    await services.broadcaster.send_to_student(student.student.id, "stu", {})
    await services.broadcaster.send_to_role(Role.ADMIN, "adm", {})
    await services.broadcaster.send_to_all("all", {})

    assert org_socket.events() == ["org", "all"]
    assert student_socket.events() == ["stu", "all"]
    assert admin_socket.events() == ["adm", "all"]
    assert anonymous_socket.events() == ["all"]


async def test_sending_to_an_empty_room_is_silent(services) -> None:
    assert await services.broadcaster.send_to_user("offline", "anything", {}) == 0


async def test_online_organization_members_are_distinct(services, connect, make_user) -> None:
    organization = make_user(Role.ORGANIZATION)
    await connect(organization)
    await connect(organization)
    await connect(make_user(Role.ORGANIZATION))

    members = services.broadcaster.online_organization_members(organization.organization.id)

    assert members == [organization.id]
    assert services.broadcaster.connected_count() == 3


async def test_disconnect_user_closes_all_connections(services, connect, make_user) -> None:
    student = make_user(Role.STUDENT)
    first, first_socket = await connect(student)
    second, second_socket = await connect(student)

    closed = await services.broadcaster.disconnect_user(student.id, "maintenance")

    assert closed == 2
    assert first_socket.closed_with == (1008, "maintenance")
    assert second_socket.closed_with == (1008, "maintenance")
    assert services.authenticator.identity_for(first.connection_id) is None
    assert services.authenticator.identity_for(second.connection_id) is None
    assert services.manager.connection_count() == 0


async def test_dispatch_from_a_worker_thread(services, connect, make_user) -> None:
    student = make_user(Role.STUDENT)
    _, socket = await connect(student)

    await to_thread.run_sync(
        services.broadcaster.dispatch, user_room(student.id), "from:thread", {"ok": True}
    )

    assert socket.of_type("from:thread") == [{"ok": True}]


async def test_dispatch_on_the_event_loop_schedules_a_task(services, connect, make_user) -> None:
    student = make_user(Role.STUDENT)
    _, socket = await connect(student)
    payload = {"items": [1]}

    services.broadcaster.dispatch(user_room(student.id), "from:loop", payload)
    payload["items"].append(2)
    for _ in range(3):
        await anyio.sleep(0)

    assert socket.of_type("from:loop") == [{"items": [1]}]


async def test_dispatch_keeps_pending_tasks_until_they_finish(services, connect, make_user) -> None:
    student = make_user(Role.STUDENT)
    _, socket = await connect(student)

    services.broadcaster.dispatch(user_room(student.id), "first", {"n": 1})
    services.broadcaster.dispatch(user_room(student.id), "second", {"n": 2})

    assert len(services.broadcaster._tasks) == 2

    await asyncio.gather(*services.broadcaster._tasks)
    await anyio.sleep(0)

    assert services.broadcaster._tasks == set()
    assert socket.of_type("first") == [{"n": 1}]
    assert socket.of_type("second") == [{"n": 2}]

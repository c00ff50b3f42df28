"""Organization-wide invitations and announcements."""

from __future__ import annotations

from typing import Any

from experience_hub.domain.entities import Role
from experience_hub.utils import now_in_app_timezone

from ..router import EventContext, EventRouter, HandlerResult, payload_str

router = EventRouter()


@router.on("organization:student:invite")
async def invite_student(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None or not identity.is_organization:
        return HandlerResult.unauthorized()
    email = payload_str(data, "email")
    if email is None:
        return HandlerResult.invalid("Email is required")

    await context.broadcaster.send_to_organization(
        identity.organization_id,
        "organization:invitation:sent",
        {
            "email": email,
            "message": payload_str(data, "message"),
            "sentBy": identity.organization_name,
            "timestamp": now_in_app_timezone(),
        },
    )
    return HandlerResult.ok()


@router.on("organization:announcement")
async def announce(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None or not identity.is_organization:
        return HandlerResult.unauthorized()
    title = payload_str(data, "title")
    message = payload_str(data, "message")
    if title is None or message is None:
        return HandlerResult.invalid("Title and message are required")

    target_role = Role.parse(data.get("targetRole"))
    await context.broadcaster.send_to_organization(
        identity.organization_id,
        "organization:announcement:new",
        {
            "title": title,
            "message": message,
            "targetRole": target_role.value if target_role else None,
            "organizationName": identity.organization_name,
            "timestamp": now_in_app_timezone(),
        },
    )
    return HandlerResult.ok()

"""Experience verification and creation fan-out."""

from __future__ import annotations

from typing import Any

from experience_hub.application.use_cases.experiences import (
    ExperienceNotFoundError,
    VerificationPermissionError,
    parse_status,
    verify_experience,
)
from experience_hub.application.use_cases.notifications import (
    VERIFICATION_UPDATE_EVENT,
    VERIFIED_EVENT,
    verification_update_payload,
    verified_payload,
)
from experience_hub.utils import now_in_app_timezone

from ..router import EventContext, EventRouter, HandlerResult, Outcome, payload_str

router = EventRouter()


@router.on(
    "experience:verify",
    errors=(Outcome.PERSISTENCE_ERROR,),
    error_message="Failed to update experience verification",
)
async def verify(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None or not identity.is_organization:
        return HandlerResult.unauthorized()

    experience_id = payload_str(data, "experienceId")
    if experience_id is None:
        return HandlerResult.invalid("Experience id is required")
    try:
        status = parse_status(payload_str(data, "status"))
    except ValueError as exc:
        return HandlerResult.invalid(str(exc))

    try:
        outcome = await context.run(
            lambda session: verify_experience(
                session,
                experience_id=experience_id,
                status=status,
                verifier_user_id=identity.user_id,
                verifier_organization_id=identity.organization_id,
            )
        )
    except ExperienceNotFoundError:
        return HandlerResult.not_found("Experience not found")
    except VerificationPermissionError:
        return HandlerResult.unauthorized()

    if outcome.student_user_id:
        await context.broadcaster.send_to_user(
            outcome.student_user_id,
            VERIFICATION_UPDATE_EVENT,
            verification_update_payload(outcome),
        )
    await context.broadcaster.send_to_organization(
        outcome.experience.organization_id, VERIFIED_EVENT, verified_payload(outcome)
    )
    return HandlerResult.ok()


@router.on("experience:created")
async def created(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None or not identity.is_organization:
        return HandlerResult.unauthorized()
    if not isinstance(data, dict) or not isinstance(data.get("experience"), dict):
        return HandlerResult.invalid("Experience is required")

    await context.broadcaster.send_to_organization(
        identity.organization_id,
        "experience:new",
        {"experience": data["experience"], "timestamp": now_in_app_timezone()},
    )
    return HandlerResult.ok()

"""Utility helpers to generate and dispatch domain notifications."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from experience_hub.application.use_cases.experiences import VerificationOutcome
from experience_hub.domain.entities import (
    Notification,
    NotificationType,
    VerificationStatus,
)
from experience_hub.infrastructure.realtime import (
    Broadcaster,
    broadcaster,
    organization_room,
    user_room,
)
from experience_hub.infrastructure.repositories import NotificationRepository
from experience_hub.utils import now_in_app_timezone

from .bridge import NOTIFICATION_NEW_EVENT, serialize_notification

VERIFICATION_UPDATE_EVENT = "experience:verification:update"
VERIFIED_EVENT = "experience:verified"

_STATUS_MESSAGES = {
    VerificationStatus.APPROVED: ("Experience verified", "verified"),
    VerificationStatus.REJECTED: ("Experience rejected", "rejected"),
    VerificationStatus.PENDING: ("Experience pending", "moved back to pending"),
    VerificationStatus.DRAFT: ("Experience returned", "returned to draft"),
}


def verification_update_payload(outcome: VerificationOutcome) -> dict[str, Any]:
    """Payload sent to the student whose experience changed."""

    experience = outcome.experience
    return {
        "experienceId": experience.id,
        "title": experience.title,
        "status": outcome.status.value,
        "organizationName": experience.organization_name,
        "timestamp": now_in_app_timezone(),
    }


def verified_payload(outcome: VerificationOutcome) -> dict[str, Any]:
    """Payload sent to the members of the verifying organization."""

    experience = outcome.experience
    return {
        "experienceId": experience.id,
        "studentName": experience.student_name,
        "status": outcome.status.value,
    }


def _persist_notification(
    session: Session,
    *,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO,
    category: str | None = None,
    action_url: str | None = None,
    metadata: dict | None = None,
    publisher: Broadcaster = broadcaster,
) -> Notification:
    notification = Notification(
        id=None,
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        category=category,
        action_url=action_url,
        metadata=metadata or {},
        created_at=now_in_app_timezone(),
    )
    saved = NotificationRepository(session).create(notification)
    publisher.dispatch(
        user_room(saved.user_id),
        NOTIFICATION_NEW_EVENT,
        {"notification": serialize_notification(saved), "timestamp": now_in_app_timezone()},
    )
    return saved


def notify_experience_verification(
    session: Session,
    *,
    outcome: VerificationOutcome,
    publisher: Broadcaster = broadcaster,
) -> Notification | None:
    """Store a verification notice for the student and push every live update."""

    experience = outcome.experience
    notification = None
    if outcome.student_user_id:
        title, verb = _STATUS_MESSAGES[outcome.status]
        organization = experience.organization_name or "The organization"
        notification = _persist_notification(
            session,
            user_id=outcome.student_user_id,
            title=title,
            message=f"{organization} {verb} your experience '{experience.title}'.",
            type=NotificationType.VERIFICATION,
            category="experience",
            action_url=f"/experiences/{experience.id}",
            metadata={"experienceId": experience.id, "status": outcome.status.value},
            publisher=publisher,
        )
        publisher.dispatch(
            user_room(outcome.student_user_id),
            VERIFICATION_UPDATE_EVENT,
            verification_update_payload(outcome),
        )

    publisher.dispatch(
        organization_room(experience.organization_id),
        VERIFIED_EVENT,
        verified_payload(outcome),
    )
    return notification


__all__ = [
    "VERIFICATION_UPDATE_EVENT",
    "VERIFIED_EVENT",
    "notify_experience_verification",
    "verification_update_payload",
    "verified_payload",
]

"""Endpoints for organization-side experience verification."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from experience_hub.application.use_cases.experiences import (
    ExperienceNotFoundError,
    VerificationPermissionError,
    verify_experience,
)
from experience_hub.application.use_cases.notifications import notify_experience_verification
from experience_hub.domain.entities import Experience, User
from experience_hub.infrastructure.database import get_db
from experience_hub.interfaces.api.dependencies import get_current_active_user
from experience_hub.interfaces.api.schemas import (
    ExperienceVerificationRead,
    ExperienceVerificationRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/experiences", tags=["experiences"])


def _experience_to_schema(experience: Experience) -> ExperienceVerificationRead:
    return ExperienceVerificationRead(
        id=experience.id,
        title=experience.title,
        status=experience.status,
        organization_id=experience.organization_id,
        student_id=experience.student_id,
        verified_at=experience.verified_at,
        verified_by=experience.verified_by,
        verification_note=experience.verification_note,
    )


@router.post("/{experience_id}/verification", response_model=ExperienceVerificationRead)
def update_verification(
    experience_id: str,
    payload: ExperienceVerificationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ExperienceVerificationRead:
    """Change the verification status of an experience and notify both sides."""

    try:
        outcome = verify_experience(
            db,
            experience_id=experience_id,
            status=payload.status,
            verifier_user_id=current_user.id,
            verifier_organization_id=(
                current_user.organization.id if current_user.organization else None
            ),
            is_admin=current_user.is_admin(),
            note=payload.note,
        )
    except ExperienceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except VerificationPermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    notify_experience_verification(db, outcome=outcome)
    logger.info(
        "Experience %s set to %s by user %s",
        experience_id,
        outcome.status.value,
        current_user.id,
    )
    return _experience_to_schema(outcome.experience)

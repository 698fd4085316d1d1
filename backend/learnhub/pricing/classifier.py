from datetime import datetime
from typing import Optional

from learnhub.core.constants import ActivationStatus, ACTIVATION_TERM_YEARS
from learnhub.core.exceptions import ConflictError
from .models import ActivationClassification, ActivationRecord


def activation_expiry(activated_at: datetime) -> datetime:
    """One year after activation; Feb 29 rolls forward to Mar 1."""
    try:
        return activated_at.replace(year=activated_at.year + ACTIVATION_TERM_YEARS)
    except ValueError:
        return activated_at.replace(
            year=activated_at.year + ACTIVATION_TERM_YEARS, month=3, day=1
        )


def is_expired(activation: ActivationRecord, now: Optional[datetime] = None) -> bool:
    return activation.expires_at < (now or datetime.utcnow())


def effective_status(activation: ActivationRecord, now: Optional[datetime] = None) -> ActivationStatus:
    """Stored status with expiry applied at read time"""
    if activation.status == ActivationStatus.ACTIVE and is_expired(activation, now):
        return ActivationStatus.EXPIRED
    return activation.status


def classify_activation(
    previous: Optional[ActivationRecord],
    now: Optional[datetime] = None,
) -> ActivationClassification:
    """
    Classify a request against the company's latest activation of the course.

    Any previous activation makes the request a renewal, whatever its status.
    """
    if previous is None:
        return ActivationClassification(is_renewal=False, previous_activation=None, is_expired=False)

    return ActivationClassification(
        is_renewal=True,
        previous_activation=previous,
        is_expired=is_expired(previous, now),
    )


def ensure_can_activate(classification: ActivationClassification) -> None:
    """Reject double activation of a course that is currently live"""
    previous = classification.previous_activation
    if (
        previous is not None
        and not classification.is_expired
        and previous.status == ActivationStatus.ACTIVE
    ):
        raise ConflictError(
            "Course is already active for your company",
            details={
                "existing_activation_id": str(previous.id),
                "expires_at": previous.expires_at.isoformat(),
            },
        )

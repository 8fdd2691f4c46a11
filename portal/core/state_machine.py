from enum import Enum


class ApplicationStatus(str, Enum):
    # Entry state: created by submission or by resubmitting a rejected application
    # Counts as active (blocks a new submission by the same user)
    PENDING = "PENDING"

    # Reviewer decision: documents verified
    # Counts as active
    APPROVED = "APPROVED"

    # Reviewer decision: owner may edit and resubmit (back to PENDING)
    # Historical rejected applications can pile up per user
    REJECTED = "REJECTED"


class UserStatus(str, Enum):
    # Default after registration; also where a lapsed or lifted block lands
    ACTIVE = "ACTIVE"

    # Temporary: carries blockedUntil/blockReason, reverts lazily once blockedUntil passes
    BLOCKED = "BLOCKED"

    # Soft delete. Terminal: nothing leaves this state
    DELETED = "DELETED"


# Applications in these states occupy the user's single "active" slot
ACTIVE_APPLICATION_STATUSES = frozenset({ApplicationStatus.PENDING, ApplicationStatus.APPROVED})

# Statuses the owner may still edit from the applicant side
EDITABLE_APPLICATION_STATUSES = frozenset({ApplicationStatus.PENDING, ApplicationStatus.REJECTED})


def is_active_application(status) -> bool:
    return ApplicationStatus(status) in ACTIVE_APPLICATION_STATUSES

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from portal.api.auth import require_admin
from portal.api.deps import get_application_registry, get_user_registry
from portal.api.schemas import (
    ApplicationOut,
    ApplicationSummary,
    BlockRequest,
    ReviewRequest,
    ReviewResponse,
    StatsResponse,
    UserList,
    UserOut,
)
from portal.callback.sender import notify_decision
from portal.core.application_registry import ApplicationRegistry
from portal.core.errors import ValidationError
from portal.core.state_machine import ApplicationStatus, UserStatus
from portal.core.user_registry import UserRegistry

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _status_filter(raw: Optional[str], enum_cls):
    """Dashboard tabs send lowercase names ("pending", "blocked") or "all"."""
    if not raw or raw.lower() == "all":
        return None
    try:
        return enum_cls(raw.upper())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown status filter: {raw}")


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------
@router.get("/applications", response_model=List[ApplicationSummary])
def list_applications(
    status: Optional[str] = None,
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    wanted = _status_filter(status, ApplicationStatus)
    rows = applications.list_all() if wanted is None else applications.list_by_status(wanted)
    return [ApplicationSummary.model_validate(a) for a in rows]


@router.get("/applications/{application_id}", response_model=ApplicationOut)
def get_application(application_id: str, applications: ApplicationRegistry = Depends(get_application_registry)):
    return ApplicationOut.model_validate(applications.get_by_id(application_id))


@router.post("/applications/{application_id}/review", response_model=ReviewResponse)
def review_application(
    application_id: str,
    body: ReviewRequest,
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    feedback = (body.feedback or "").strip() or None
    if body.decision == ApplicationStatus.REJECTED.value and not feedback:
        raise ValidationError("Rejection reason is required", {"feedback": "Rejection reason is required"})

    app = applications.set_status(application_id, body.decision, feedback)
    outcome = notify_decision(app)
    return ReviewResponse(application=ApplicationSummary.model_validate(app), notification=outcome)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@router.get("/users", response_model=UserList)
def list_users(
    q: str = "",
    status: Optional[str] = None,
    users: UserRegistry = Depends(get_user_registry),
):
    wanted = _status_filter(status, UserStatus)
    rows = users.search(q.strip())
    if wanted is not None:
        rows = [u for u in rows if u.status == wanted]
    return UserList(total=len(rows), users=[UserOut.model_validate(u) for u in rows])


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, users: UserRegistry = Depends(get_user_registry)):
    return UserOut.model_validate(users.get_by_id(user_id))


@router.post("/users/{user_id}/block", response_model=UserOut)
def block_user(user_id: str, body: BlockRequest, users: UserRegistry = Depends(get_user_registry)):
    return UserOut.model_validate(users.block(user_id, body.reason.strip(), body.durationDays))


@router.post("/users/{user_id}/unblock", response_model=UserOut)
def unblock_user(user_id: str, users: UserRegistry = Depends(get_user_registry)):
    return UserOut.model_validate(users.unblock(user_id))


@router.delete("/users/{user_id}", response_model=UserOut)
def delete_user(user_id: str, users: UserRegistry = Depends(get_user_registry)):
    return UserOut.model_validate(users.delete(user_id))


# ---------------------------------------------------------------------------
@router.get("/stats", response_model=StatsResponse)
def stats(
    applications: ApplicationRegistry = Depends(get_application_registry),
    users: UserRegistry = Depends(get_user_registry),
):
    """Counts per status for the dashboard tabs."""
    return StatsResponse(applications=applications.count_by_status(), users=users.count_by_status())

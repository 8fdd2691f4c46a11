from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portal.api.auth import require_api_key, require_applicant
from portal.api.deps import get_application_registry, get_user_registry
from portal.api.schemas import (
    ApplicationForm,
    ApplicationOut,
    EligibilityResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SubmitResponse,
    UserOut,
)
from portal.core.application_registry import ApplicationRegistry
from portal.core.errors import ConflictError, NotFoundError
from portal.core.state_machine import EDITABLE_APPLICATION_STATUSES, ApplicationStatus
from portal.core.user_registry import AUTH_BLOCKED, UserRegistry
from portal.store.models import Application, User

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])


def _owned(applications: ApplicationRegistry, application_id: str, user: User) -> Application:
    app = applications.get_by_id(application_id)
    # Someone else's application looks exactly like a missing one
    if app.userId != user.id:
        raise NotFoundError("Application not found")
    return app


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
@router.post("/users", response_model=UserOut, status_code=201)
def register(body: RegisterRequest, users: UserRegistry = Depends(get_user_registry)):
    user = users.create(body.firstName, body.lastName, body.email, body.phoneNumber)
    return UserOut.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, users: UserRegistry = Depends(get_user_registry)):
    result = users.authenticate(body.email)
    if result.ok:
        return LoginResponse(success=True, user=UserOut.model_validate(result.user))

    if result.status == AUTH_BLOCKED:
        until = result.blockedUntil
        reason = result.blockReason or "Policy violation"
        out = LoginResponse(
            success=False,
            error=f"Your account is temporarily blocked until {until:%Y-%m-%d %H:%M UTC}. Reason: {reason}",
            blockedUntil=until,
            blockReason=reason,
        )
    else:
        out = LoginResponse(success=False, error="This account has been deleted")
    return JSONResponse(status_code=403, content=out.model_dump(mode="json"))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(require_applicant)):
    return UserOut.model_validate(user)


# ---------------------------------------------------------------------------
# Applications (owner side)
# ---------------------------------------------------------------------------
@router.get("/applications/eligibility", response_model=EligibilityResponse)
def eligibility(
    user: User = Depends(require_applicant),
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    return EligibilityResponse(hasActiveApplication=applications.has_active_application(user.id))


@router.post("/applications", response_model=SubmitResponse, status_code=201)
def submit_application(
    form: ApplicationForm,
    user: User = Depends(require_applicant),
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    app = applications.submit(user.id, form.profile(), form.documents())
    return SubmitResponse(applicationId=app.id)


@router.get("/applications", response_model=List[ApplicationOut])
def my_applications(
    user: User = Depends(require_applicant),
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    return [ApplicationOut.model_validate(a) for a in applications.list_for_user(user.id)]


@router.get("/applications/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: str,
    user: User = Depends(require_applicant),
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    return ApplicationOut.model_validate(_owned(applications, application_id, user))


@router.put("/applications/{application_id}", response_model=ApplicationOut)
def edit_application(
    application_id: str,
    form: ApplicationForm,
    user: User = Depends(require_applicant),
    applications: ApplicationRegistry = Depends(get_application_registry),
):
    """
    Applicant edit flow: PENDING stays PENDING, REJECTED goes back to review,
    APPROVED is closed for edits.
    """
    app = _owned(applications, application_id, user)
    if app.status not in EDITABLE_APPLICATION_STATUSES:
        raise ConflictError("Approved applications can no longer be edited")
    if app.status == ApplicationStatus.REJECTED:
        app = applications.resubmit(application_id, form.profile(), form.documents())
    else:
        # Re-checked under the registry lock: an approval may land meanwhile
        app = applications.update(
            application_id, form.profile(), form.documents(), expected_status=ApplicationStatus.PENDING
        )
    return ApplicationOut.model_validate(app)

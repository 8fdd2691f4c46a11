"""
Application Registry
--------------------
Owns the passport application lifecycle:

    submit() --> PENDING --review--> APPROVED
                    ^        \-----> REJECTED --resubmit()--+
                    +---------------------------------------+

Invariant kept by every mutation: a user holds at most one *active*
application (PENDING or APPROVED). Rejected ones stay on file as history.
Mutations run under the registry lock so the check-then-write sequences
(active-slot check, resubmission) cannot interleave.
"""
import uuid
from typing import Callable, ContextManager, Dict, List, Optional

from portal.core.errors import ConflictError, NotFoundError, ValidationError
from portal.core.state_machine import ApplicationStatus, is_active_application
from portal.core.validation import check_application_fields
from portal.observability.logging import log
from portal.settings import settings
from portal.store.base import ApplicationStore
from portal.store.models import Application, ApplicantProfile, IdentityDocuments
from portal.utils.lock import local_lock_factory
from portal.utils.time import next_stamp, utc_now


class ApplicationRegistry:
    def __init__(
        self,
        store: ApplicationStore,
        clock: Callable = utc_now,
        lock_factory: Optional[Callable[[], ContextManager]] = None,
        min_applicant_age: Optional[int] = None,
    ):
        self._store = store
        self._clock = clock
        self._lock = lock_factory or local_lock_factory()
        self._min_age = settings.MIN_APPLICANT_AGE if min_applicant_age is None else int(min_applicant_age)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def has_active_application(self, user_id: str) -> bool:
        return any(is_active_application(a.status) for a in self.list_for_user(user_id))

    def get_by_id(self, application_id: str) -> Application:
        app = self._store.get(application_id)
        if app is None:
            raise NotFoundError("Application not found")
        return app

    def list_for_user(self, user_id: str) -> List[Application]:
        return [a for a in self._store.list_all() if a.userId == user_id]

    def list_all(self) -> List[Application]:
        return self._store.list_all()

    def list_by_status(self, status) -> List[Application]:
        status = ApplicationStatus(status)
        return [a for a in self._store.list_all() if a.status == status]

    def count_by_status(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in ApplicationStatus}
        for a in self._store.list_all():
            counts[a.status.value] += 1
        return counts

    # ------------------------------------------------------------------
    # Applicant side
    # ------------------------------------------------------------------
    def submit(self, user_id: str, profile: ApplicantProfile, documents: IdentityDocuments) -> Application:
        with self._lock():
            now = self._clock()
            app = Application(id=self._new_id(), userId=user_id)
            app.apply_profile(profile)
            app.apply_documents(documents)
            check_application_fields(app, now.date(), self._min_age)

            if self.has_active_application(user_id):
                raise ConflictError(
                    "You already have an active application. Only one application per user is allowed."
                )

            app.status = ApplicationStatus.PENDING
            app.createdAt = now
            app.updatedAt = now
            self._store.add(app)

        log(event="application_submitted", applicationId=app.id, userId=user_id)
        return app

    def update(
        self,
        application_id: str,
        profile: ApplicantProfile,
        documents: IdentityDocuments,
        expected_status=None,
    ) -> Application:
        """
        Overwrite profile fields; documents left empty keep the ones on file.
        Status is untouched: which statuses may be edited is the editor's call.
        With expected_status the edit only lands if the record is still in that
        status once the lock is held (a review may have happened in between).
        """
        with self._lock():
            app = self.get_by_id(application_id)
            if expected_status is not None and app.status != ApplicationStatus(expected_status):
                raise ConflictError(f"Application is no longer {ApplicationStatus(expected_status).value}")
            now = self._clock()
            app.apply_profile(profile)
            app.apply_documents(documents)
            check_application_fields(app, now.date(), self._min_age)
            app.updatedAt = next_stamp(now, app.updatedAt)
            self._store.save(app)

        log(event="application_updated", applicationId=app.id, status=app.status.value)
        return app

    def resubmit(self, application_id: str, profile: ApplicantProfile, documents: IdentityDocuments) -> Application:
        """Edit a REJECTED application and put it back in the review queue."""
        with self._lock():
            app = self.get_by_id(application_id)
            if app.status != ApplicationStatus.REJECTED:
                raise ConflictError("Only rejected applications can be resubmitted")
            if self._has_other_active(app):
                raise ConflictError(
                    "You already have an active application. Only one application per user is allowed."
                )

            now = self._clock()
            app.apply_profile(profile)
            app.apply_documents(documents)
            check_application_fields(app, now.date(), self._min_age)
            app.status = ApplicationStatus.PENDING
            app.feedback = None
            app.updatedAt = next_stamp(now, app.updatedAt)
            self._store.save(app)

        log(event="application_resubmitted", applicationId=app.id, userId=app.userId)
        return app

    # ------------------------------------------------------------------
    # Reviewer side
    # ------------------------------------------------------------------
    def set_status(self, application_id: str, new_status, feedback: Optional[str] = None) -> Application:
        """
        Any status may move to any other (admin override). Two guards remain:
        reviving a rejected application must not give its owner a second
        active one, and PENDING never carries reviewer feedback.
        """
        new_status = ApplicationStatus(new_status)
        with self._lock():
            app = self.get_by_id(application_id)

            if new_status == ApplicationStatus.PENDING and feedback:
                raise ValidationError(
                    "Feedback can only be recorded with a review decision",
                    {"feedback": "Not allowed for PENDING"},
                )
            if (
                is_active_application(new_status)
                and not is_active_application(app.status)
                and self._has_other_active(app)
            ):
                raise ConflictError("The applicant already has another active application")

            previous = app.status
            app.status = new_status
            if new_status == ApplicationStatus.PENDING:
                app.feedback = None
            elif feedback:
                app.feedback = feedback
            app.updatedAt = next_stamp(self._clock(), app.updatedAt)
            self._store.save(app)

        log(
            event="application_status_changed",
            applicationId=app.id,
            fromStatus=previous.value,
            toStatus=new_status.value,
            hasFeedback=bool(app.feedback),
        )
        return app

    # ------------------------------------------------------------------
    def _has_other_active(self, app: Application) -> bool:
        return any(
            other.id != app.id and is_active_application(other.status)
            for other in self.list_for_user(app.userId)
        )

    def _new_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex[:12]
            if self._store.get(candidate) is None:
                return candidate

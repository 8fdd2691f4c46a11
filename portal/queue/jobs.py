from portal.callback.client import send_decision_http
from portal.observability.logging import log
from portal.store.factory import build_registries


def send_decision_callback_job(payload: dict):
    """
    Background delivery of one review decision.
    Raises on failure so RQ's Retry policy schedules the next attempt.
    """
    log(event="decision_callback_job_start", applicationId=payload.get("applicationId"))
    ok, status_code, error = send_decision_http(payload)
    if not ok:
        raise RuntimeError(f"Decision callback failed: {status_code} {error}")
    return status_code


def release_expired_blocks_job():
    """
    Periodic sweep: revert every lapsed block so dashboards stop listing stale BLOCKED users.
    Only meaningful with STORE_BACKEND=redis (workers do not share process memory).
    """
    registries = build_registries()
    released = registries.users.release_expired_blocks()
    log(event="release_expired_blocks_job_done", released=len(released))
    return [u.id for u in released]

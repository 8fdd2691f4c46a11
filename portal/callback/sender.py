"""
Review decision notifications.

Called by the admin review route after the decision is committed. A failed
notification never undoes the decision: inline failures are logged, queued
ones are retried by the RQ worker.
"""
from rq import Retry

from portal.callback.client import send_decision_http
from portal.callback.payloads import build_decision_payload
from portal.observability.logging import log
from portal.settings import settings
from portal.store.models import Application

MODES = ("off", "sync", "rq", "hybrid")


def notify_decision(app: Application) -> str:
    """
    Dispatch the decision according to DECISION_CALLBACK_MODE.
    Returns what happened: "skipped" | "sent" | "failed" | "queued".
    """
    mode = (settings.DECISION_CALLBACK_MODE or "off").lower()
    if mode not in MODES:
        log(event="decision_callback_bad_mode", mode=mode)
        mode = "off"
    if mode == "off" or not settings.DECISION_CALLBACK_URL:
        return "skipped"

    payload = build_decision_payload(app)

    if mode in ("sync", "hybrid"):
        ok, _, _ = send_decision_http(payload)
        if ok:
            return "sent"
        if mode == "sync":
            return "failed"

    # Lazy imports: the worker module pulls in the store factory
    from portal.queue.jobs import send_decision_callback_job
    from portal.queue.rq_conn import get_queue

    attempts = max(1, int(settings.CALLBACK_MAX_ATTEMPTS))
    try:
        get_queue().enqueue(
            send_decision_callback_job,
            payload,
            retry=Retry(max=attempts - 1, interval=int(settings.CALLBACK_RETRY_INTERVAL_SEC)) if attempts > 1 else None,
        )
    except Exception as e:
        # The decision is already stored; only the notification is lost
        log(
            event="decision_callback_enqueue_failed",
            applicationId=app.id,
            mode=mode,
            errorType=type(e).__name__,
            error=str(e)[:500],
        )
        return "failed"

    log(event="decision_callback_queued", applicationId=app.id, status=app.status.value)
    return "queued"

import time
from typing import Any, Dict, Optional, Tuple

import httpx

from portal.callback.payloads import PAYLOAD_VERSION, idempotency_key
from portal.observability.logging import log
from portal.settings import settings


def send_decision_http(payload: Dict[str, Any], timeout: Optional[float] = None) -> Tuple[bool, int, Optional[str]]:
    """
    POST one decision payload.
    Returns (success, status_code, error). Never raises; status_code is 0 on transport errors.
    """
    url = settings.DECISION_CALLBACK_URL
    if not url:
        return False, 0, "DECISION_CALLBACK_URL is not set"

    headers = {
        "Idempotency-Key": idempotency_key(payload),
        "X-Payload-Version": PAYLOAD_VERSION,
        "Content-Type": "application/json",
    }
    timeout = float(timeout or settings.CALLBACK_TIMEOUT_SEC)

    start = time.time()
    try:
        with httpx.Client(timeout=timeout) as client:
            resp = client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        elapsed_ms = int((time.time() - start) * 1000)
        log(
            event="decision_callback_exception",
            applicationId=payload.get("applicationId"),
            elapsedMs=elapsed_ms,
            errorType=type(e).__name__,
            error=str(e)[:500],
        )
        return False, 0, str(e)

    elapsed_ms = int((time.time() - start) * 1000)
    if 200 <= resp.status_code < 300:
        log(
            event="decision_callback_sent",
            applicationId=payload.get("applicationId"),
            statusCode=int(resp.status_code),
            elapsedMs=elapsed_ms,
        )
        return True, resp.status_code, None

    log(
        event="decision_callback_failed",
        applicationId=payload.get("applicationId"),
        statusCode=int(resp.status_code),
        elapsedMs=elapsed_ms,
        responseText=(resp.text or "")[:500],
    )
    return False, resp.status_code, f"HTTP {resp.status_code}"

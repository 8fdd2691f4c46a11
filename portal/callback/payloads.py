from typing import Any, Dict

from portal.store.models import Application
from portal.utils.time import to_iso

PAYLOAD_VERSION = "1.0"


def build_decision_payload(app: Application) -> Dict[str, Any]:
    """
    Review decision as sent to the notification endpoint.
    Carries no profile or document data; receivers look the application up by id.
    """
    return {
        "version": PAYLOAD_VERSION,
        "applicationId": app.id,
        "userId": app.userId,
        "status": app.status.value,
        "feedback": app.feedback or "",
        "decidedAt": to_iso(app.updatedAt),
    }


def idempotency_key(payload: Dict[str, Any]) -> str:
    # One key per decision: re-sends of the same decision collapse on the receiver
    return f"{payload.get('applicationId')}:{payload.get('status')}:{payload.get('decidedAt')}"

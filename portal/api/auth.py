from fastapi import Depends, Header, HTTPException

from portal.api.deps import get_user_registry
from portal.core.errors import NotFoundError
from portal.core.user_registry import AUTH_BLOCKED, UserRegistry
from portal.settings import settings
from portal.store.models import User
from portal.utils.time import to_iso


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    API key is OPTIONAL.
    - If API_KEY env is empty: allow all requests.
    - If API_KEY env is set: require matching x-api-key header.
    """
    if not getattr(settings, "API_KEY", ""):
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


def require_admin(x_admin_key: str = Header(default="", alias="x-admin-key")):
    if not settings.ADMIN_RBAC_ENABLED:
        return
    # Secure default: if enabled but no key configured, reject all.
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access disabled (no key configured)")
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")


def require_applicant(
    x_user_id: str = Header(default="", alias="x-user-id"),
    users: UserRegistry = Depends(get_user_registry),
) -> User:
    """
    Resolve the calling applicant. Session handling lives in the presentation
    layer; it forwards the signed-in user's id in x-user-id.
    Blocked and deleted accounts are turned away here (a lapsed block is lifted on the way).
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing x-user-id header")
    try:
        result = users.check_access(x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user")

    if result.ok:
        return result.user
    if result.status == AUTH_BLOCKED:
        raise HTTPException(
            status_code=403,
            detail={
                "error": "blocked",
                "blockedUntil": to_iso(result.blockedUntil),
                "blockReason": result.blockReason or "Policy violation",
            },
        )
    raise HTTPException(status_code=403, detail={"error": "deleted"})

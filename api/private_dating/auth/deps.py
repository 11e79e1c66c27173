"""
Authentication dependencies for FastAPI.

The caller's principal (a wallet address) travels as the ``sub`` claim of a
bearer token signed with the shared ``JWT_SECRET``. Issuing those tokens is
the wallet gateway's job; ``/auth/dev-token`` mints them only in DEV_MODE.
"""

import logging
import uuid

from fastapi import Header, HTTPException

from private_dating import config
from private_dating.auth.security import decode_access_token

logger = logging.getLogger(__name__)


def _auth_failure(reason: str, status_code: int = 401) -> HTTPException:
    trace_id = str(uuid.uuid4())
    logger.warning(f"[AUTH_FAILURE] reason={reason} trace_id={trace_id}")
    detail = {"message": "unauthorized", "trace_id": trace_id}
    if config.DEV_MODE:
        detail["reason"] = reason
    return HTTPException(status_code=status_code, detail=detail)


def _extract_bearer(authorization: str | None) -> str:
    if not authorization:
        raise _auth_failure("missing_token")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise _auth_failure("malformed_token")
    return parts[1].strip()


def get_current_principal(authorization: str | None = Header(default=None, alias="Authorization")) -> str:
    token = _extract_bearer(authorization)
    try:
        payload = decode_access_token(token)
    except HTTPException as e:
        reason = "token_expired" if "expired" in str(e.detail).lower() else "signature_invalid"
        raise _auth_failure(reason) from e

    principal = str(payload.get("sub") or "").strip().lower()
    if not principal:
        raise _auth_failure("token_missing_subject")
    if principal == config.ENGINE_PRINCIPAL:
        raise _auth_failure("reserved_principal", status_code=403)
    logger.debug(f"[auth] token valid, sub={principal}")
    return principal

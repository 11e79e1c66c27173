import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..auth.admin_deps import get_current_admin
from ..deps import get_engine
from ..engine import DatingEngine
from ..errors import EngineError
from ..http_helpers import normalize_principal

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def admin_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "admin"}


@router.post("/admin/users/{principal}/deactivate")
def admin_deactivate_user(
    principal: str,
    admin: str = Depends(get_current_admin),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, str]:
    target = normalize_principal(principal)
    engine.admin_deactivate(admin, target)
    return {"status": "deactivated", "principal": target}


@router.post("/admin/coprocessor/drain")
def drain_local_coprocessor(
    admin: str = Depends(get_current_admin),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    coprocessor = engine.state.ops.coprocessor
    drain = getattr(coprocessor, "drain", None)
    if drain is None:
        raise HTTPException(status_code=409, detail="Co-processor delivers reveals on its own")

    delivered: list[int] = []
    failed: list[dict[str, Any]] = []
    for response in drain():
        try:
            if engine.on_revealed(response.correlation_id, response.cleartext, response.proof):
                delivered.append(response.correlation_id)
        except EngineError as exc:
            logger.warning("[admin] reveal delivery failed match_id=%s code=%s", response.correlation_id, exc.code)
            failed.append({"match_id": response.correlation_id, "code": exc.code, "detail": exc.detail})
    return {"delivered": delivered, "failed": failed}

from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_principal
from ..deps import get_engine
from ..engine import DatingEngine
from ..schemas import RevealCallback

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def coprocessor_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "coprocessor"}


@router.post("/coprocessor/reveals")
def reveal_callback(payload: RevealCallback, engine: DatingEngine = Depends(get_engine)) -> dict[str, Any]:
    applied = engine.on_revealed(payload.correlation_id, payload.cleartext, payload.proof)
    return {"match_id": payload.correlation_id, "applied": applied}


@router.get("/decrypt/{handle}")
def user_decrypt(
    handle: str,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    return {"handle": handle, "value": engine.user_decrypt(principal, handle)}

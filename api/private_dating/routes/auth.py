from fastapi import APIRouter, HTTPException

from .. import config
from ..auth.security import create_access_token
from ..http_helpers import validate_principal
from ..schemas import DevTokenRequest

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def auth_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "auth"}


@router.post("/dev-token")
def issue_dev_token(payload: DevTokenRequest) -> dict[str, str]:
    if not config.DEV_MODE:
        raise HTTPException(status_code=404, detail="Not found")
    principal = validate_principal(payload.principal)
    return {"access_token": create_access_token(principal), "token_type": "bearer", "principal": principal}

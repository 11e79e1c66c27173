from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_principal
from ..config import RL_MATCH_DECISION_LIMIT, RL_MATCH_REQUEST_LIMIT, RL_WINDOW_SECONDS
from ..deps import get_engine
from ..engine import DatingEngine
from ..http_helpers import match_to_dict, normalize_principal
from ..schemas import MatchDetails, MatchRequestInput
from ..services.rate_limit import rate_limit_dependency

router = APIRouter()
scaffold_router = APIRouter()

RL_MATCH_REQUEST = rate_limit_dependency("match_request", RL_MATCH_REQUEST_LIMIT, RL_WINDOW_SECONDS)
RL_MATCH_DECISION = rate_limit_dependency("match_decision", RL_MATCH_DECISION_LIMIT, RL_WINDOW_SECONDS)


@scaffold_router.get("/health")
def match_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "match"}


@router.post("/matches", status_code=201, dependencies=[RL_MATCH_REQUEST])
def request_match(
    payload: MatchRequestInput,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    match_id = engine.request_match(principal, normalize_principal(payload.target), payload.message)
    return match_to_dict(engine.get_match_details(principal, match_id))


@router.get("/matches")
def get_my_matches(
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    ids = engine.get_my_matches(principal)
    return {"matches": [match_to_dict(engine.get_match_details(principal, mid)) for mid in ids]}


@router.get("/matches/{match_id}", response_model=MatchDetails)
def get_match_details(
    match_id: int,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    return match_to_dict(engine.get_match_details(principal, match_id))


@router.post("/matches/{match_id}/accept", dependencies=[RL_MATCH_DECISION])
def accept_match(
    match_id: int,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    engine.accept_match(principal, match_id)
    return match_to_dict(engine.get_match_details(principal, match_id))


@router.post("/matches/{match_id}/reject", dependencies=[RL_MATCH_DECISION])
def reject_match(
    match_id: int,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    engine.reject_match(principal, match_id)
    return match_to_dict(engine.get_match_details(principal, match_id))

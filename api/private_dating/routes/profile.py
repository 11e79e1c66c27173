from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_principal
from ..deps import get_engine
from ..engine import DatingEngine
from ..http_helpers import normalize_principal
from ..schemas import BioUpdateRequest, LookingForMatchRequest, PreferencesRequest, PublicProfile, RegisterRequest

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def profile_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "profile"}


@router.post("/profiles", status_code=201)
def register_profile(
    payload: RegisterRequest,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    user_id = engine.register(
        principal,
        age=payload.age,
        location=payload.location,
        interests=payload.interests,
        personality=payload.personality,
        bio=payload.bio,
    )
    return {"user_id": user_id, "principal": principal}


@router.get("/profiles/{user}", response_model=PublicProfile)
def get_public_profile(user: str, engine: DatingEngine = Depends(get_engine)) -> dict[str, Any]:
    return engine.get_public_profile(normalize_principal(user))


@router.patch("/profiles/me/bio")
def update_bio(
    payload: BioUpdateRequest,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, str]:
    engine.update_bio(principal, payload.bio)
    return {"status": "ok"}


@router.put("/profiles/me/looking")
def set_looking_for_match(
    payload: LookingForMatchRequest,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    engine.set_looking_for_match(principal, payload.looking)
    return {"status": "ok", "looking": payload.looking}


@router.post("/profiles/me/deactivate")
def deactivate_profile(
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, str]:
    engine.deactivate(principal)
    return {"status": "deactivated"}


@router.put("/profiles/me/preferences")
def set_preferences(
    payload: PreferencesRequest,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    engine.set_preferences(principal, payload.min_age, payload.max_age, payload.preferred_location)
    prefs = engine.get_preferences(principal)
    return {
        "status": "ok",
        "encrypted_min_age": prefs.encrypted_min_age.handle,
        "encrypted_max_age": prefs.encrypted_max_age.handle,
        "encrypted_preferred_location": prefs.encrypted_preferred_location.handle,
    }


@router.get("/stats")
def get_platform_stats(engine: DatingEngine = Depends(get_engine)) -> dict[str, int]:
    user_count, match_count = engine.get_platform_stats()
    return {"user_count": user_count, "match_count": match_count}

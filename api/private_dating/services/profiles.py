from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import config
from ..errors import AlreadyRegistered, InvalidAttribute, NotRegistered, Unauthorized
from . import events
from .ciphertext import EUint8

if TYPE_CHECKING:
    from ..state import EngineState

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    user_id: int
    principal: str
    encrypted_age: EUint8
    encrypted_location: EUint8
    encrypted_interests: EUint8
    encrypted_personality: EUint8
    public_bio: str
    is_active: bool
    is_looking_for_match: bool
    registered_at: datetime


@dataclass
class Preferences:
    encrypted_min_age: EUint8
    encrypted_max_age: EUint8
    encrypted_preferred_location: EUint8
    updated_at: datetime


def validate_age(name: str, value: Any) -> int:
    try:
        age = int(value)
    except (TypeError, ValueError):
        raise InvalidAttribute(f"{name} must be an integer") from None
    if not config.MIN_AGE <= age <= config.MAX_AGE:
        raise InvalidAttribute(f"{name} must be between {config.MIN_AGE} and {config.MAX_AGE}, got {age}")
    return age


def validate_code(name: str, value: Any) -> int:
    try:
        code = int(value)
    except (TypeError, ValueError):
        raise InvalidAttribute(f"{name} must be an integer") from None
    if not 0 <= code <= config.ATTRIBUTE_CODE_MAX:
        raise InvalidAttribute(f"{name} must be between 0 and {config.ATTRIBUTE_CODE_MAX}, got {code}")
    return code


def validate_bio(bio: str | None) -> str:
    bio = bio or ""
    if len(bio) > config.BIO_MAX_LENGTH:
        raise InvalidAttribute(f"bio must be {config.BIO_MAX_LENGTH} characters or fewer")
    return bio


def get_profile(state: EngineState, principal: str) -> Profile:
    profile = state.profiles.get(principal)
    if profile is None:
        raise NotRegistered(f"{principal} is not registered")
    return profile


def _encrypt_owned(state: EngineState, principal: str, value: int) -> EUint8:
    ops = state.ops
    enc = ops.encrypt_u8(value)
    ops.grant_self_access(enc)
    ops.grant_access(enc, principal)
    return enc


def register(
    state: EngineState,
    principal: str,
    age: int,
    location: int,
    interests: int,
    personality: int,
    bio: str = "",
) -> int:
    if principal == state.engine_principal:
        raise Unauthorized(f"{principal} is reserved for the engine")
    if principal.isdigit():
        raise InvalidAttribute("principal must not be all digits, those are user ids")
    if principal in state.profiles:
        raise AlreadyRegistered(f"{principal} is already registered")
    age = validate_age("age", age)
    location = validate_code("location", location)
    interests = validate_code("interests", interests)
    personality = validate_code("personality", personality)
    bio = validate_bio(bio)

    user_id = state.user_count + 1
    now = state.now()
    state.profiles[principal] = Profile(
        user_id=user_id,
        principal=principal,
        encrypted_age=_encrypt_owned(state, principal, age),
        encrypted_location=_encrypt_owned(state, principal, location),
        encrypted_interests=_encrypt_owned(state, principal, interests),
        encrypted_personality=_encrypt_owned(state, principal, personality),
        public_bio=bio,
        is_active=True,
        is_looking_for_match=True,
        registered_at=now,
    )
    state.user_ids[user_id] = principal
    state.user_count = user_id
    state.emit(events.USER_REGISTERED, user=principal, user_id=user_id, timestamp=now.isoformat())
    return user_id


def update_bio(state: EngineState, principal: str, bio: str) -> None:
    profile = get_profile(state, principal)
    bio = validate_bio(bio)
    profile.public_bio = bio
    state.emit(events.PROFILE_UPDATED, user=principal, field="bio")


def set_looking_for_match(state: EngineState, principal: str, looking: bool) -> None:
    profile = get_profile(state, principal)
    profile.is_looking_for_match = bool(looking)
    state.emit(events.PROFILE_UPDATED, user=principal, field="is_looking_for_match", value=bool(looking))


def deactivate(state: EngineState, principal: str) -> None:
    profile = get_profile(state, principal)
    profile.is_active = False
    profile.is_looking_for_match = False
    for room_id in state.user_rooms.get(principal, []):
        state.rooms[room_id].is_active = False
    state.emit(events.PROFILE_UPDATED, user=principal, field="is_active", value=False)


def admin_deactivate(state: EngineState, admin: str, principal: str) -> None:
    if admin != state.owner:
        raise Unauthorized("only the engine owner may deactivate other users")
    get_profile(state, principal)
    logger.info("[profiles] admin deactivation user=%s by=%s", principal, admin)
    deactivate(state, principal)


def set_preferences(state: EngineState, principal: str, min_age: int, max_age: int, preferred_location: int) -> None:
    get_profile(state, principal)
    min_age = validate_age("min_age", min_age)
    max_age = validate_age("max_age", max_age)
    if min_age > max_age:
        raise InvalidAttribute("min_age must not exceed max_age")
    preferred_location = validate_code("preferred_location", preferred_location)

    state.preferences[principal] = Preferences(
        encrypted_min_age=_encrypt_owned(state, principal, min_age),
        encrypted_max_age=_encrypt_owned(state, principal, max_age),
        encrypted_preferred_location=_encrypt_owned(state, principal, preferred_location),
        updated_at=state.now(),
    )
    state.emit(events.PREFERENCES_UPDATED, user=principal)


def get_preferences(state: EngineState, principal: str) -> Preferences | None:
    get_profile(state, principal)
    return state.preferences.get(principal)


def resolve_principal(state: EngineState, user: str | int) -> str:
    if isinstance(user, int) or (isinstance(user, str) and user.isdigit()):
        principal = state.user_ids.get(int(user))
        if principal is None:
            raise NotRegistered(f"no user with id {user}")
        return principal
    return user


def get_public_profile(state: EngineState, user: str | int) -> dict[str, Any]:
    profile = get_profile(state, resolve_principal(state, user))
    return {
        "user_id": profile.user_id,
        "principal": profile.principal,
        "is_active": profile.is_active,
        "bio": profile.public_bio,
        "registered_at": profile.registered_at,
        "is_looking_for_match": profile.is_looking_for_match,
    }


def get_platform_stats(state: EngineState) -> tuple[int, int]:
    return state.user_count, state.match_count

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from .. import config
from ..errors import (
    AlreadyProcessed,
    DuplicateRequest,
    MatchNotFound,
    SelfMatch,
    TargetUnavailable,
    Unauthorized,
)
from . import chat, events, reveal
from .ciphertext import EUint8
from .compatibility import compute_score
from .profiles import get_profile, validate_code
from .state_machine import MatchStatus, transition_status

if TYPE_CHECKING:
    from ..state import EngineState

logger = logging.getLogger(__name__)


@dataclass
class MatchRequest:
    id: int
    requester: str
    target: str
    encrypted_score: EUint8
    status: MatchStatus
    created_at: datetime
    encrypted_message: EUint8
    is_accepted: bool = False
    accepted_at: datetime | None = None
    is_revealed: bool = False
    public_score: int | None = None
    room_id: str | None = None

    def involves(self, principal: str) -> bool:
        return principal in {self.requester, self.target}


def _get_request(state: EngineState, match_id: int) -> MatchRequest:
    match = state.requests.get(match_id)
    if match is None:
        raise MatchNotFound(f"match {match_id} does not exist")
    return match


def _has_open_request(state: EngineState, requester: str, target: str) -> bool:
    for mid in state.sent_requests.get(requester, []):
        m = state.requests[mid]
        if m.target == target and m.status in {MatchStatus.PENDING, MatchStatus.MUTUAL}:
            return True
    return False


def request_match(state: EngineState, requester: str, target: str, message: int = 0) -> int:
    if state.engine_principal in {requester, target}:
        raise Unauthorized(f"{state.engine_principal} is reserved for the engine")
    if requester == target:
        raise SelfMatch("cannot request a match with yourself")
    requester_profile = get_profile(state, requester)
    if not requester_profile.is_active:
        raise Unauthorized(f"{requester} has a deactivated profile")
    target_profile = get_profile(state, target)
    if not target_profile.is_active or not target_profile.is_looking_for_match:
        raise TargetUnavailable(f"{target} is not available for matching")
    if _has_open_request(state, requester, target):
        raise DuplicateRequest(f"{requester} already has an open request to {target}")
    message = validate_code("message", message)

    ops = state.ops
    score = compute_score(
        ops,
        requester_profile,
        target_profile,
        state.score_weights,
        age_window=state.age_window,
        symmetric_age=state.symmetric_age,
    )
    encrypted_message = ops.encrypt_u8(message)
    for value in (score, encrypted_message):
        ops.grant_self_access(value)
        ops.grant_access(value, requester)
        ops.grant_access(value, target)

    match_id = state.next_match_id
    state.next_match_id += 1
    state.requests[match_id] = MatchRequest(
        id=match_id,
        requester=requester,
        target=target,
        encrypted_score=score,
        status=MatchStatus.PENDING,
        created_at=state.now(),
        encrypted_message=encrypted_message,
    )
    state.sent_requests.setdefault(requester, []).append(match_id)
    state.received_requests.setdefault(target, []).append(match_id)
    state.emit(events.MATCH_REQUESTED, match_id=match_id, requester=requester, target=target)

    detect_mutual_match(state, requester, target)
    return match_id


def find_reciprocal(state: EngineState, requester: str, target: str) -> MatchRequest | None:
    for mid in state.sent_requests.get(target, []):
        m = state.requests[mid]
        if m.target == requester and m.status == MatchStatus.PENDING:
            return m
    return None


def detect_mutual_match(state: EngineState, requester: str, target: str) -> MatchRequest | None:
    reciprocal = find_reciprocal(state, requester, target)
    if reciprocal is None:
        return None

    reciprocal.status = transition_status(reciprocal.status, "reciprocate")
    reciprocal.room_id = chat.create_room(state, reciprocal.requester, reciprocal.target)
    state.match_count += 1
    state.emit(
        events.MUTUAL_MATCH_FOUND,
        match_id=reciprocal.id,
        user_a=reciprocal.requester,
        user_b=reciprocal.target,
        room_id=reciprocal.room_id,
    )
    logger.info("[matching] mutual match_id=%s users=%s,%s", reciprocal.id, reciprocal.requester, reciprocal.target)
    if state.reveal_mode == config.REVEAL_MODE_ON_MUTUAL:
        reveal.submit_reveal(state, reciprocal)
    return reciprocal


def reject_match(state: EngineState, principal: str, match_id: int) -> None:
    match = _get_request(state, match_id)
    if principal != match.target:
        raise Unauthorized("only the target of a request may reject it")
    if match.is_accepted:
        raise AlreadyProcessed(f"match {match_id} was already accepted")
    new_status = transition_status(match.status, "reject")
    if new_status == match.status:
        raise AlreadyProcessed(f"match {match_id} is {match.status.value}")
    match.status = new_status
    state.emit(events.MATCH_REJECTED, match_id=match_id, requester=match.requester, target=match.target)


def accept_match(state: EngineState, principal: str, match_id: int) -> None:
    match = _get_request(state, match_id)
    if principal != match.target:
        raise Unauthorized("only the target of a request may accept it")
    if match.status == MatchStatus.REJECTED:
        raise AlreadyProcessed(f"match {match_id} was rejected")
    if match.is_accepted:
        raise AlreadyProcessed(f"match {match_id} was already accepted")

    match.is_accepted = True
    match.accepted_at = state.now()
    state.emit(events.MATCH_ACCEPTED, match_id=match_id, requester=match.requester, target=match.target)
    if state.reveal_mode == config.REVEAL_MODE_ON_ACCEPT:
        reveal.submit_reveal(state, match)


def get_my_matches(state: EngineState, principal: str) -> list[int]:
    ids = set(state.sent_requests.get(principal, [])) | set(state.received_requests.get(principal, []))
    return sorted(ids)


def get_match_details(state: EngineState, principal: str, match_id: int) -> MatchRequest:
    match = _get_request(state, match_id)
    if not match.involves(principal):
        raise Unauthorized(f"{principal} is not part of match {match_id}")
    return dataclasses.replace(match)

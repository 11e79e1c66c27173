"""Asynchronous score reveal.

Submission and callback are two separate engine calls joined by the
pending-reveal table (``EngineState.pending_reveals``, keyed by match id).
Between them a match sits at ``is_revealed=False, public_score=None`` for as
long as the co-processor takes, possibly forever.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..auth.security import verify_reveal_proof
from ..errors import InvalidRevealProof, MatchNotFound, RevealNotRequested
from . import events
from .ciphertext import decode_cleartext

if TYPE_CHECKING:
    from ..state import EngineState
    from .matching import MatchRequest

logger = logging.getLogger(__name__)


def submit_reveal(state: EngineState, match: MatchRequest) -> bool:
    if match.is_revealed or match.id in state.pending_reveals:
        return False
    state.ops.request_reveal(match.encrypted_score, correlation_id=match.id)
    state.pending_reveals[match.id] = match.encrypted_score.handle
    state.emit(events.REVEAL_REQUESTED, match_id=match.id)
    logger.info("[reveal] submitted match_id=%s", match.id)
    return True


def on_revealed(state: EngineState, correlation_id: int, cleartext: str, proof: str) -> bool:
    if not verify_reveal_proof(correlation_id, cleartext, proof, state.reveal_key):
        logger.warning("[reveal] proof rejected correlation_id=%s", correlation_id)
        raise InvalidRevealProof(f"reveal proof for match {correlation_id} does not verify")

    match = state.requests.get(correlation_id)
    if match is None:
        raise MatchNotFound(f"match {correlation_id} does not exist")
    if match.is_revealed:
        logger.debug("[reveal] duplicate callback ignored match_id=%s", correlation_id)
        return False
    if correlation_id not in state.pending_reveals:
        raise RevealNotRequested(f"no reveal pending for match {correlation_id}")

    try:
        score = decode_cleartext(cleartext)
    except ValueError as exc:
        raise InvalidRevealProof(f"cleartext for match {correlation_id} does not decode: {exc}") from exc

    match.public_score = score
    match.is_revealed = True
    del state.pending_reveals[correlation_id]
    state.emit(events.COMPATIBILITY_REVEALED, match_id=match.id, requester=match.requester, target=match.target, score=score)
    return True

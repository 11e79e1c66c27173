"""Public entry points of the matchmaking engine.

Each method is one call on the execution substrate: it runs under a single
re-entrant lock, so calls never interleave. Notifications queued during a
call are only published once the call returns normally, in call order and
before the lock is released. Transient ciphertext grants are dropped at the
end of every call, successful or not.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterator

from . import config
from .services import chat, matching, profiles, reveal
from .services.acl import AccessControlList
from .services.chat import ChatMessage
from .services.ciphertext import CipherKind, CipherOps, CoProcessor, EncryptedValue
from .services.coprocessor import LocalCoProcessor
from .services.events import Listener, Notification, log_notification
from .services.matching import MatchRequest
from .services.profiles import Preferences
from .state import EngineState, utcnow

logger = logging.getLogger(__name__)


class DatingEngine:
    def __init__(self, state: EngineState, listeners: list[Listener] | None = None) -> None:
        self.state = state
        self.listeners: list[Listener] = list(listeners) if listeners is not None else [log_notification]
        self._lock = threading.RLock()

    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    @contextmanager
    def _transaction(self) -> Iterator[EngineState]:
        with self._lock:
            try:
                yield self.state
            except Exception:
                self.state.outbox.clear()
                raise
            finally:
                self.state.ops.acl.clear_transient()
            published, self.state.outbox = self.state.outbox, []
            self._publish(published)

    def _publish(self, notifications: list[Notification]) -> None:
        for n in notifications:
            for listener in self.listeners:
                try:
                    listener(n)
                except Exception:
                    logger.exception("[engine] listener failed for %s", n.name)

    # profiles

    def register(self, principal: str, age: int, location: int, interests: int, personality: int, bio: str = "") -> int:
        with self._transaction() as s:
            return profiles.register(s, principal, age, location, interests, personality, bio)

    def update_bio(self, principal: str, bio: str) -> None:
        with self._transaction() as s:
            profiles.update_bio(s, principal, bio)

    def set_looking_for_match(self, principal: str, looking: bool) -> None:
        with self._transaction() as s:
            profiles.set_looking_for_match(s, principal, looking)

    def deactivate(self, principal: str) -> None:
        with self._transaction() as s:
            profiles.deactivate(s, principal)

    def admin_deactivate(self, admin: str, principal: str) -> None:
        with self._transaction() as s:
            profiles.admin_deactivate(s, admin, principal)

    def set_preferences(self, principal: str, min_age: int, max_age: int, preferred_location: int) -> None:
        with self._transaction() as s:
            profiles.set_preferences(s, principal, min_age, max_age, preferred_location)

    def get_preferences(self, principal: str) -> Preferences | None:
        with self._transaction() as s:
            return profiles.get_preferences(s, principal)

    def get_public_profile(self, user: str | int) -> dict[str, Any]:
        with self._transaction() as s:
            return profiles.get_public_profile(s, user)

    def get_platform_stats(self) -> tuple[int, int]:
        with self._transaction() as s:
            return profiles.get_platform_stats(s)

    # matches

    def request_match(self, requester: str, target: str, message: int = 0) -> int:
        with self._transaction() as s:
            return matching.request_match(s, requester, target, message)

    def reject_match(self, principal: str, match_id: int) -> None:
        with self._transaction() as s:
            matching.reject_match(s, principal, match_id)

    def accept_match(self, principal: str, match_id: int) -> None:
        with self._transaction() as s:
            matching.accept_match(s, principal, match_id)

    def get_my_matches(self, principal: str) -> list[int]:
        with self._transaction() as s:
            return matching.get_my_matches(s, principal)

    def get_match_details(self, principal: str, match_id: int) -> MatchRequest:
        with self._transaction() as s:
            return matching.get_match_details(s, principal, match_id)

    # chat

    def send_message(self, principal: str, room_id: str, content: str) -> int:
        with self._transaction() as s:
            return chat.send_message(s, principal, room_id, content)

    def get_messages(self, principal: str, room_id: str, offset: int = 0, limit: int = 50) -> list[ChatMessage]:
        with self._transaction() as s:
            return chat.get_messages(s, principal, room_id, offset, limit)

    def get_user_chats(self, principal: str) -> list[str]:
        with self._transaction() as s:
            return chat.get_user_chats(s, principal)

    def get_room(self, principal: str, room_id: str) -> dict[str, Any]:
        with self._transaction() as s:
            return chat.get_room(s, principal, room_id)

    # co-processor boundary

    def on_revealed(self, correlation_id: int, cleartext: str, proof: str) -> bool:
        with self._transaction() as s:
            return reveal.on_revealed(s, correlation_id, cleartext, proof)

    def user_decrypt(self, principal: str, value: EncryptedValue | str) -> int:
        if isinstance(value, str):
            value = EncryptedValue(handle=value, kind=CipherKind.UINT8)
        with self._transaction() as s:
            return s.ops.user_decrypt(value, principal)


def build_engine(
    coprocessor: CoProcessor | None = None,
    *,
    owner: str = config.ENGINE_OWNER,
    engine_principal: str = config.ENGINE_PRINCIPAL,
    reveal_key: str = config.REVEAL_SIGNING_KEY,
    reveal_mode: str = config.REVEAL_MODE,
    score_weights: dict[str, Any] | None = None,
    age_window: int = config.AGE_CLOSENESS_WINDOW,
    symmetric_age: bool = config.SYMMETRIC_AGE_DISTANCE,
    clock: Callable[[], datetime] = utcnow,
    listeners: list[Listener] | None = None,
) -> DatingEngine:
    if reveal_mode not in {config.REVEAL_MODE_ON_ACCEPT, config.REVEAL_MODE_ON_MUTUAL}:
        raise ValueError(f"unknown reveal mode: {reveal_mode}")
    if coprocessor is None:
        coprocessor = LocalCoProcessor(signing_key=reveal_key)
    ops = CipherOps(coprocessor, AccessControlList(), engine_principal)
    state = EngineState(
        owner=owner,
        ops=ops,
        reveal_key=reveal_key,
        reveal_mode=reveal_mode,
        score_weights=config.validate_score_weights(score_weights or config.DEFAULT_SCORE_WEIGHTS),
        age_window=age_window,
        symmetric_age=symmetric_age,
        clock=clock,
    )
    logger.info("[engine] ready owner=%s reveal_mode=%s weights=%s", owner, reveal_mode, state.score_weights)
    return DatingEngine(state, listeners=listeners)

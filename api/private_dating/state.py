from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from . import config
from .services.ciphertext import CipherOps
from .services.events import Notification

if TYPE_CHECKING:
    from .services.chat import ChatRoom
    from .services.matching import MatchRequest
    from .services.profiles import Preferences, Profile


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EngineState:
    """Everything the engine knows, passed explicitly to every operation."""

    owner: str
    ops: CipherOps
    reveal_key: str
    reveal_mode: str = config.REVEAL_MODE_ON_ACCEPT
    score_weights: dict[str, int] = field(default_factory=lambda: config.validate_score_weights(config.DEFAULT_SCORE_WEIGHTS))
    age_window: int = config.AGE_CLOSENESS_WINDOW
    symmetric_age: bool = config.SYMMETRIC_AGE_DISTANCE
    clock: Callable[[], datetime] = utcnow

    user_count: int = 0
    match_count: int = 0
    next_match_id: int = 1

    profiles: dict[str, Profile] = field(default_factory=dict)
    user_ids: dict[int, str] = field(default_factory=dict)
    preferences: dict[str, Preferences] = field(default_factory=dict)
    requests: dict[int, MatchRequest] = field(default_factory=dict)
    sent_requests: dict[str, list[int]] = field(default_factory=dict)
    received_requests: dict[str, list[int]] = field(default_factory=dict)
    rooms: dict[str, ChatRoom] = field(default_factory=dict)
    user_rooms: dict[str, list[str]] = field(default_factory=dict)
    pending_reveals: dict[int, str] = field(default_factory=dict)

    outbox: list[Notification] = field(default_factory=list)

    @property
    def engine_principal(self) -> str:
        return self.ops.engine_principal

    def now(self) -> datetime:
        return self.clock()

    def emit(self, name: str, **payload: Any) -> None:
        self.outbox.append(Notification(name=name, payload=payload, emitted_at=self.now()))

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy import text

logger = logging.getLogger(__name__)

USER_REGISTERED = "UserRegistered"
PROFILE_UPDATED = "ProfileUpdated"
PREFERENCES_UPDATED = "PreferencesUpdated"
MATCH_REQUESTED = "MatchRequested"
MUTUAL_MATCH_FOUND = "MutualMatchFound"
MATCH_REJECTED = "MatchRejected"
MATCH_ACCEPTED = "MatchAccepted"
CHAT_ROOM_CREATED = "ChatRoomCreated"
MESSAGE_SENT = "MessageSent"
REVEAL_REQUESTED = "RevealRequested"
COMPATIBILITY_REVEALED = "CompatibilityRevealed"


@dataclass(frozen=True)
class Notification:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[Notification], None]


def log_notification(notification: Notification) -> None:
    logger.info("[events] %s %s", notification.name, notification.payload)


def log_engine_event(
    db,
    *,
    event_name: str,
    payload: dict[str, Any] | None = None,
    emitted_at: datetime | None = None,
) -> None:
    payload = payload or {}
    db.execute(
        text(
            """
            INSERT INTO engine_event (id, event_name, payload, emitted_at)
            VALUES (:id, :event_name, :payload, :emitted_at)
            """
        ),
        {
            "id": str(uuid.uuid4()),
            "event_name": event_name,
            "payload": json.dumps(payload, default=str),
            "emitted_at": emitted_at or datetime.now(timezone.utc),
        },
    )


def list_engine_events(db, *, limit: int = 50, event_name: str | None = None) -> list[dict[str, Any]]:
    rows = db.execute(
        text(
            """
            SELECT id, event_name, payload, emitted_at
            FROM engine_event
            WHERE (:event_name = '' OR event_name = :event_name)
            ORDER BY emitted_at DESC
            LIMIT :limit
            """
        ),
        {"event_name": event_name or "", "limit": max(1, min(int(limit), 500))},
    ).mappings().all()
    out = []
    for r in rows:
        try:
            payload = json.loads(r["payload"]) if r["payload"] else {}
        except json.JSONDecodeError:
            payload = {}
        out.append(
            {
                "id": str(r["id"]),
                "event_name": r["event_name"],
                "payload": payload,
                "emitted_at": r["emitted_at"],
            }
        )
    return out


def sql_journal_listener(session_factory) -> Listener:
    def _persist(notification: Notification) -> None:
        with session_factory() as db:
            log_engine_event(
                db,
                event_name=notification.name,
                payload=notification.payload,
                emitted_at=notification.emitted_at,
            )
            db.commit()

    return _persist

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import config
from ..errors import InvalidAttribute, RoomInactive, RoomNotFound, Unauthorized
from . import events

if TYPE_CHECKING:
    from ..state import EngineState


@dataclass(frozen=True)
class ChatMessage:
    sender: str
    content: str
    sent_at: datetime


@dataclass
class ChatRoom:
    id: str
    user_a: str
    user_b: str
    created_at: datetime
    is_active: bool = True
    messages: list[ChatMessage] = field(default_factory=list)

    def has_participant(self, principal: str) -> bool:
        return principal in {self.user_a, self.user_b}


def room_id_for(user_a: str, user_b: str, created_at: datetime) -> str:
    return hashlib.sha256(f"{user_a}|{user_b}|{created_at.isoformat()}".encode("utf-8")).hexdigest()


def create_room(state: EngineState, user_a: str, user_b: str) -> str:
    now = state.now()
    room_id = room_id_for(user_a, user_b, now)
    state.rooms[room_id] = ChatRoom(id=room_id, user_a=user_a, user_b=user_b, created_at=now)
    state.user_rooms.setdefault(user_a, []).append(room_id)
    state.user_rooms.setdefault(user_b, []).append(room_id)
    state.emit(events.CHAT_ROOM_CREATED, room_id=room_id, user_a=user_a, user_b=user_b)
    return room_id


def _participant_room(state: EngineState, principal: str, room_id: str) -> ChatRoom:
    room = state.rooms.get(room_id)
    if room is None:
        raise RoomNotFound(f"chat room {room_id} does not exist")
    if not room.has_participant(principal):
        raise Unauthorized(f"{principal} is not a participant of room {room_id}")
    return room


def send_message(state: EngineState, principal: str, room_id: str, content: str) -> int:
    room = _participant_room(state, principal, room_id)
    if not room.is_active:
        raise RoomInactive(f"chat room {room_id} is inactive")
    if not content:
        raise InvalidAttribute("message content required")
    if len(content) > config.MESSAGE_MAX_LENGTH:
        raise InvalidAttribute(f"message must be {config.MESSAGE_MAX_LENGTH} characters or fewer")

    room.messages.append(ChatMessage(sender=principal, content=content, sent_at=state.now()))
    index = len(room.messages) - 1
    state.emit(events.MESSAGE_SENT, room_id=room_id, sender=principal, index=index)
    return index


def get_messages(state: EngineState, principal: str, room_id: str, offset: int = 0, limit: int = 50) -> list[ChatMessage]:
    room = _participant_room(state, principal, room_id)
    if offset < 0 or limit < 0:
        raise InvalidAttribute("offset and limit must be non-negative")
    total = len(room.messages)
    if offset >= total:
        return []
    end = min(offset + min(limit, config.MESSAGE_PAGE_MAX), total)
    return room.messages[offset:end]


def get_user_chats(state: EngineState, principal: str) -> list[str]:
    return list(state.user_rooms.get(principal, []))


def get_room(state: EngineState, principal: str, room_id: str) -> dict[str, Any]:
    room = _participant_room(state, principal, room_id)
    return {
        "id": room.id,
        "user_a": room.user_a,
        "user_b": room.user_b,
        "other_user": room.user_b if principal == room.user_a else room.user_a,
        "created_at": room.created_at,
        "is_active": room.is_active,
        "message_count": len(room.messages),
    }

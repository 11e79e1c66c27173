from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_principal
from ..config import RL_MESSAGE_SEND_LIMIT, RL_WINDOW_SECONDS
from ..deps import get_engine
from ..engine import DatingEngine
from ..http_helpers import message_to_dict
from ..schemas import MessagePage, SendMessageRequest
from ..services.rate_limit import rate_limit_dependency

router = APIRouter()
scaffold_router = APIRouter()

RL_MESSAGE_SEND = rate_limit_dependency("message_send", RL_MESSAGE_SEND_LIMIT, RL_WINDOW_SECONDS)


@scaffold_router.get("/health")
def chat_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "chat"}


@router.get("/chats")
def list_user_chats(
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    return {"rooms": [engine.get_room(principal, room_id) for room_id in engine.get_user_chats(principal)]}


@router.get("/chats/{room_id}/messages", response_model=MessagePage)
def get_messages(
    room_id: str,
    offset: int = 0,
    limit: int = 50,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    messages = engine.get_messages(principal, room_id, offset, limit)
    return {
        "room_id": room_id,
        "offset": offset,
        "messages": [message_to_dict(offset + i, m) for i, m in enumerate(messages)],
    }


@router.post("/chats/{room_id}/messages", status_code=201, dependencies=[RL_MESSAGE_SEND])
def send_message(
    room_id: str,
    payload: SendMessageRequest,
    principal: str = Depends(get_current_principal),
    engine: DatingEngine = Depends(get_engine),
) -> dict[str, Any]:
    index = engine.send_message(principal, room_id, payload.content)
    return {"room_id": room_id, "index": index, "sender": principal}

import re
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from . import config
from .errors import EngineError
from .services.chat import ChatMessage
from .services.matching import MatchRequest

_PRINCIPAL_RE = re.compile(r"[a-z0-9_\-:.]{1,128}")


def normalize_principal(principal: str) -> str:
    return principal.strip().lower()


def validate_principal(principal: str) -> str:
    p = normalize_principal(principal)
    if not _PRINCIPAL_RE.fullmatch(p):
        raise HTTPException(status_code=400, detail="principal must be 1-128 chars of letters, digits, _-:.")
    if p.isdigit():
        raise HTTPException(status_code=400, detail="principal must not be all digits")
    if p == config.ENGINE_PRINCIPAL:
        raise HTTPException(status_code=400, detail="principal is reserved")
    return p


async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "code": exc.code})


def match_to_dict(match: MatchRequest) -> dict[str, Any]:
    return {
        "id": match.id,
        "requester": match.requester,
        "target": match.target,
        "status": match.status.value,
        "created_at": match.created_at,
        "encrypted_score": match.encrypted_score.handle,
        "encrypted_message": match.encrypted_message.handle,
        "is_accepted": match.is_accepted,
        "accepted_at": match.accepted_at,
        "is_revealed": match.is_revealed,
        "public_score": match.public_score,
        "room_id": match.room_id,
    }


def message_to_dict(index: int, message: ChatMessage) -> dict[str, Any]:
    return {
        "index": index,
        "sender": message.sender,
        "content": message.content,
        "sent_at": message.sent_at,
    }

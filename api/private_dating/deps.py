from fastapi import HTTPException, Request

from .engine import DatingEngine


def validate_admin_token(token: str | None, admin_token: str | None) -> None:
    if not admin_token or not token or token != admin_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")


def get_engine(request: Request) -> DatingEngine:
    return request.app.state.engine

from fastapi import Header, Request

from private_dating import config
from private_dating.deps import validate_admin_token


def get_current_admin(request: Request, x_admin_token: str | None = Header(default=None, alias="X-Admin-Token")) -> str:
    """Admin calls act as the engine owner once the shared admin token checks out."""
    validate_admin_token(x_admin_token, config.ADMIN_TOKEN)
    return request.app.state.engine.state.owner

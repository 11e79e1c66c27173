from fastapi import APIRouter, Depends

from ..auth.admin_deps import get_current_admin
from ..database import SessionLocal
from ..schemas import EventsResponse
from ..services.events import list_engine_events

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def events_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "events"}


@router.get("/events", response_model=EventsResponse)
def get_recent_events(limit: int = 50, event_name: str | None = None, admin: str = Depends(get_current_admin)) -> dict:
    with SessionLocal() as db:
        return {"events": list_engine_events(db, limit=limit, event_name=event_name)}

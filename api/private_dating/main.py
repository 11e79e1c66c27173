import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from . import models  # noqa: F401  registers engine_event on Base.metadata
from .database import Base, SessionLocal
from .database import engine as db_engine
from .engine import build_engine
from .errors import EngineError
from .http_helpers import engine_error_handler
from .routes import include_modular_routers
from .services.events import log_notification, sql_journal_listener

logger = logging.getLogger(__name__)

app = FastAPI(title="Private Dating Engine API")
include_modular_routers(app)
app.add_exception_handler(EngineError, engine_error_handler)

ALLOWED_ORIGINS = [
    "http://localhost:1033",
    "http://127.0.0.1:1033",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _journal_session():
    return SessionLocal()


app.state.engine = build_engine(listeners=[log_notification, sql_journal_listener(_journal_session)])


def run_migrations() -> None:
    Base.metadata.create_all(bind=db_engine)


def wait_for_db(max_attempts: int = 20, delay_seconds: float = 1.5) -> None:
    last_err: Exception | None = None
    for _ in range(max_attempts):
        try:
            with SessionLocal() as db:
                db.execute(text("SELECT 1"))
                db.commit()
            return
        except OperationalError as exc:
            last_err = exc
            time.sleep(delay_seconds)
    if last_err:
        raise last_err


@app.on_event("startup")
def on_startup() -> None:
    wait_for_db()
    run_migrations()
    user_count, match_count = app.state.engine.get_platform_stats()
    logger.info("[startup] engine owner=%s users=%s matches=%s", app.state.engine.state.owner, user_count, match_count)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

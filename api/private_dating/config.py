import json
import os
from typing import Any

MIN_AGE = int(os.getenv("MIN_AGE", "18"))
MAX_AGE = int(os.getenv("MAX_AGE", "100"))
BIO_MAX_LENGTH = int(os.getenv("BIO_MAX_LENGTH", "500"))
MESSAGE_MAX_LENGTH = int(os.getenv("MESSAGE_MAX_LENGTH", "1000"))
MESSAGE_PAGE_MAX = int(os.getenv("MESSAGE_PAGE_MAX", "100"))

# Attribute codes (location, interests, personality, message) are 8-bit ciphertexts.
ATTRIBUTE_CODE_MAX = 255

AGE_CLOSENESS_WINDOW = int(os.getenv("AGE_CLOSENESS_WINDOW", "5"))
SYMMETRIC_AGE_DISTANCE = os.getenv("SYMMETRIC_AGE_DISTANCE", "true").lower() == "true"

REVEAL_MODE_ON_ACCEPT = "on_accept"
REVEAL_MODE_ON_MUTUAL = "on_mutual"
REVEAL_MODE = os.getenv("REVEAL_MODE", REVEAL_MODE_ON_ACCEPT).strip().lower()

DEFAULT_SCORE_WEIGHTS: dict[str, int] = {
    "AGE_W": int(os.getenv("AGE_W", "30")),
    "LOCATION_W": int(os.getenv("LOCATION_W", "40")),
    "INTERESTS_W": int(os.getenv("INTERESTS_W", "30")),
}

if os.getenv("SCORE_WEIGHTS_JSON"):
    try:
        DEFAULT_SCORE_WEIGHTS.update(json.loads(os.getenv("SCORE_WEIGHTS_JSON", "{}")))
    except json.JSONDecodeError:
        pass


def validate_score_weights(weights: dict[str, Any]) -> dict[str, int]:
    out = {k: int(weights.get(k, 0)) for k in ("AGE_W", "LOCATION_W", "INTERESTS_W")}
    if any(v < 0 for v in out.values()):
        raise ValueError("score weights must be non-negative")
    if sum(out.values()) > 100:
        raise ValueError(f"score weights must sum to at most 100, got {sum(out.values())}")
    return out


ENGINE_OWNER = os.getenv("ENGINE_OWNER", "0xowner").strip().lower()
ENGINE_PRINCIPAL = os.getenv("ENGINE_PRINCIPAL", "engine").strip().lower()
REVEAL_SIGNING_KEY = os.getenv("REVEAL_SIGNING_KEY", "dev-reveal-key")

JWT_SECRET = os.getenv("JWT_SECRET", "")
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "60"))
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./private_dating.db")

RL_MATCH_REQUEST_LIMIT = int(os.getenv("RL_MATCH_REQUEST_LIMIT", "30"))
RL_MATCH_DECISION_LIMIT = int(os.getenv("RL_MATCH_DECISION_LIMIT", "100"))
RL_MESSAGE_SEND_LIMIT = int(os.getenv("RL_MESSAGE_SEND_LIMIT", "120"))
RL_WINDOW_SECONDS = int(os.getenv("RL_WINDOW_SECONDS", "60"))

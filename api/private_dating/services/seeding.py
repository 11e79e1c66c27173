import random
from collections import Counter
from typing import Any

from ..engine import DatingEngine
from ..errors import EngineError

CLUSTERS = {
    "downtown": {"weight": 0.4, "location": 1, "interests": [2, 3], "age": (22, 32)},
    "campus": {"weight": 0.35, "location": 2, "interests": [4, 2], "age": (18, 26)},
    "suburbs": {"weight": 0.25, "location": 3, "interests": [5, 6, 3], "age": (30, 55)},
}


def _pick_cluster(rng: random.Random) -> str:
    names = list(CLUSTERS.keys())
    weights = [CLUSTERS[n]["weight"] for n in names]
    return rng.choices(names, weights=weights, k=1)[0]


def seed_demo_users(
    engine: DatingEngine,
    *,
    n_users: int = 20,
    seed: int = 42,
    request_rate: float = 0.3,
    accept_all: bool = False,
) -> dict[str, Any]:
    """Register synthetic users and let them request each other at random.

    Principals look like ``0xdemo0001``. Returns a summary of what happened.
    """
    rng = random.Random(seed)
    principals: list[str] = []
    clusters: Counter[str] = Counter()
    for i in range(n_users):
        cluster = _pick_cluster(rng)
        traits = CLUSTERS[cluster]
        principal = f"0xdemo{i + 1:04d}"
        engine.register(
            principal,
            age=rng.randint(*traits["age"]),
            location=traits["location"],
            interests=rng.choice(traits["interests"]),
            personality=rng.randint(0, 255),
            bio=f"demo user from {cluster}",
        )
        principals.append(principal)
        clusters[cluster] += 1

    requested = 0
    skipped = 0
    for requester in principals:
        for target in principals:
            if requester == target or rng.random() >= request_rate:
                continue
            try:
                match_id = engine.request_match(requester, target, message=rng.randint(0, 9))
            except EngineError:
                skipped += 1
                continue
            requested += 1
            if accept_all:
                engine.accept_match(target, match_id)

    user_count, match_count = engine.get_platform_stats()
    return {
        "owner": engine.state.owner,
        "users": user_count,
        "requests": requested,
        "skipped_requests": skipped,
        "mutual_matches": match_count,
        "chat_rooms": len(engine.state.rooms),
        "clusters": dict(clusters),
    }

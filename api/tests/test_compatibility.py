import random

from private_dating.engine import build_engine
from private_dating.services.compatibility import compute_score

WEIGHTS = {"AGE_W": 30, "LOCATION_W": 40, "INTERESTS_W": 30}


def _engine():
    return build_engine(listeners=[])


def _profile(engine, principal, age, location, interests, personality=0):
    engine.register(principal, age, location, interests, personality)
    return engine.state.profiles[principal]


def _score(engine, a, b, symmetric=True):
    ops = engine.state.ops
    score = compute_score(ops, a, b, WEIGHTS, age_window=5, symmetric_age=symmetric)
    return ops.coprocessor.decrypt(score.handle)


def test_alice_and_bob_score_full_marks():
    engine = _engine()
    alice = _profile(engine, "0xalice", 25, 1, 2)
    bob = _profile(engine, "0xbob", 27, 1, 2)
    assert _score(engine, alice, bob) == 100


def test_each_component_contributes_its_weight():
    engine = _engine()
    base = _profile(engine, "0xbase", 30, 1, 2)
    far_age = _profile(engine, "0xfar", 50, 1, 2)
    other_loc = _profile(engine, "0xloc", 30, 9, 2)
    other_int = _profile(engine, "0xint", 30, 1, 9)
    nothing = _profile(engine, "0xnone", 70, 9, 9)
    assert _score(engine, base, far_age) == 70
    assert _score(engine, base, other_loc) == 60
    assert _score(engine, base, other_int) == 70
    assert _score(engine, base, nothing) == 0


def test_age_window_boundary():
    engine = _engine()
    a = _profile(engine, "0xa", 30, 0, 0)
    b = _profile(engine, "0xb", 35, 1, 1)
    c = _profile(engine, "0xc", 36, 1, 1)
    assert _score(engine, a, b) == 30
    assert _score(engine, a, c) == 0


def test_symmetric_age_distance_is_order_independent():
    engine = _engine()
    younger = _profile(engine, "0xyoung", 25, 1, 2)
    older = _profile(engine, "0xold", 29, 1, 2)
    assert _score(engine, younger, older) == 100
    assert _score(engine, older, younger) == 100


def test_legacy_one_directional_age_distance_wraps():
    engine = _engine()
    younger = _profile(engine, "0xyoung", 25, 1, 2)
    older = _profile(engine, "0xold", 29, 1, 2)
    assert _score(engine, older, younger, symmetric=False) == 100
    # 25 - 29 wraps to 252, far outside the window
    assert _score(engine, younger, older, symmetric=False) == 70


def test_score_is_bounded_for_arbitrary_profiles():
    engine = _engine()
    rng = random.Random(7)
    profiles = [
        _profile(engine, f"0xu{i}", rng.randint(18, 100), rng.randint(0, 255), rng.randint(0, 3))
        for i in range(12)
    ]
    for a in profiles:
        for b in profiles:
            if a is b:
                continue
            assert 0 <= _score(engine, a, b) <= 100
            assert _score(engine, a, b, symmetric=False) in {0, 30, 40, 60, 70, 100}

import threading

import pytest

from private_dating.engine import build_engine
from private_dating.errors import (
    AccessDenied,
    AlreadyRegistered,
    InvalidAttribute,
    NotRegistered,
    Unauthorized,
)

OWNER = "0xowner"


def _engine(captured=None):
    return build_engine(owner=OWNER, listeners=[captured.append] if captured is not None else [])


def _register(engine, principal, age=25, location=1, interests=2, personality=7, bio=""):
    return engine.register(principal, age, location, interests, personality, bio)


def test_register_assigns_sequential_user_ids_and_counts_users():
    engine = _engine()
    assert _register(engine, "0xalice") == 1
    assert _register(engine, "0xbob") == 2
    assert engine.get_platform_stats() == (2, 0)


def test_register_twice_fails_without_touching_first_profile():
    engine = _engine()
    _register(engine, "0xalice", bio="first")
    before = engine.state.profiles["0xalice"]
    with pytest.raises(AlreadyRegistered):
        _register(engine, "0xalice", age=40, bio="second")
    assert engine.state.profiles["0xalice"] is before
    assert before.public_bio == "first"
    assert engine.get_platform_stats() == (1, 0)


def test_register_after_deactivation_still_fails():
    engine = _engine()
    _register(engine, "0xalice")
    engine.deactivate("0xalice")
    with pytest.raises(AlreadyRegistered):
        _register(engine, "0xalice")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"age": 17},
        {"age": 101},
        {"bio": "x" * 501},
        {"location": 256},
        {"interests": -1},
        {"personality": 300},
    ],
)
def test_register_rejects_invalid_attributes(kwargs):
    engine = _engine()
    with pytest.raises(InvalidAttribute):
        _register(engine, "0xalice", **kwargs)
    assert "0xalice" not in engine.state.profiles
    assert engine.get_platform_stats() == (0, 0)


def test_register_accepts_boundary_values():
    engine = _engine()
    _register(engine, "0xa", age=18, bio="x" * 500, location=0)
    _register(engine, "0xb", age=100, location=255)
    assert engine.get_platform_stats()[0] == 2


def test_attributes_are_stored_encrypted_and_granted_to_owner_and_engine():
    engine = _engine()
    _register(engine, "0xalice", age=25)
    profile = engine.state.profiles["0xalice"]
    acl = engine.state.ops.acl
    assert acl.grantees(profile.encrypted_age.handle) == {"engine", "0xalice"}
    assert engine.user_decrypt("0xalice", profile.encrypted_age) == 25
    with pytest.raises(AccessDenied):
        engine.user_decrypt("0xmallory", profile.encrypted_age)


def test_profile_mutations_require_registration():
    engine = _engine()
    with pytest.raises(NotRegistered):
        engine.update_bio("0xghost", "hi")
    with pytest.raises(NotRegistered):
        engine.set_looking_for_match("0xghost", False)
    with pytest.raises(NotRegistered):
        engine.deactivate("0xghost")
    with pytest.raises(NotRegistered):
        engine.get_public_profile("0xghost")


def test_update_bio_and_looking_flag():
    captured = []
    engine = _engine(captured)
    _register(engine, "0xalice")
    engine.update_bio("0xalice", "likes hiking")
    engine.set_looking_for_match("0xalice", False)

    public = engine.get_public_profile("0xalice")
    assert public["bio"] == "likes hiking"
    assert public["is_looking_for_match"] is False
    assert public["is_active"] is True
    assert [n.name for n in captured] == ["UserRegistered", "ProfileUpdated", "ProfileUpdated"]

    with pytest.raises(InvalidAttribute):
        engine.update_bio("0xalice", "y" * 501)
    assert engine.get_public_profile("0xalice")["bio"] == "likes hiking"


def test_public_profile_lookup_by_user_id():
    engine = _engine()
    _register(engine, "0xalice")
    user_id = _register(engine, "0xbob", bio="bob here")
    assert engine.get_public_profile(user_id)["principal"] == "0xbob"
    assert engine.get_public_profile(str(user_id))["bio"] == "bob here"
    with pytest.raises(NotRegistered):
        engine.get_public_profile(99)


def test_deactivate_is_soft_delete():
    engine = _engine()
    _register(engine, "0xalice")
    engine.deactivate("0xalice")
    public = engine.get_public_profile("0xalice")
    assert public["is_active"] is False
    assert public["is_looking_for_match"] is False
    assert engine.get_platform_stats() == (1, 0)


def test_admin_deactivate_is_owner_only():
    engine = _engine()
    _register(engine, "0xalice")
    _register(engine, "0xbob")
    with pytest.raises(Unauthorized):
        engine.admin_deactivate("0xbob", "0xalice")
    assert engine.get_public_profile("0xalice")["is_active"] is True

    engine.admin_deactivate(OWNER, "0xalice")
    assert engine.get_public_profile("0xalice")["is_active"] is False
    with pytest.raises(NotRegistered):
        engine.admin_deactivate(OWNER, "0xghost")


def test_set_preferences_encrypts_and_overwrites():
    engine = _engine()
    _register(engine, "0xalice")
    assert engine.get_preferences("0xalice") is None

    engine.set_preferences("0xalice", 24, 35, 1)
    first = engine.get_preferences("0xalice")
    assert engine.user_decrypt("0xalice", first.encrypted_max_age) == 35

    engine.set_preferences("0xalice", 30, 40, 2)
    second = engine.get_preferences("0xalice")
    assert second.encrypted_min_age.handle != first.encrypted_min_age.handle
    assert engine.user_decrypt("0xalice", second.encrypted_preferred_location) == 2


def test_set_preferences_validation():
    engine = _engine()
    with pytest.raises(NotRegistered):
        engine.set_preferences("0xghost", 20, 30, 1)
    _register(engine, "0xalice")
    with pytest.raises(InvalidAttribute):
        engine.set_preferences("0xalice", 40, 30, 1)
    with pytest.raises(InvalidAttribute):
        engine.set_preferences("0xalice", 10, 30, 1)
    with pytest.raises(InvalidAttribute):
        engine.set_preferences("0xalice", 20, 30, 999)
    assert engine.get_preferences("0xalice") is None


def test_failed_call_publishes_nothing_and_drops_transient_grants():
    captured = []
    engine = _engine(captured)
    _register(engine, "0xalice")
    captured.clear()

    with pytest.raises(AlreadyRegistered):
        _register(engine, "0xalice")
    assert captured == []
    assert engine.state.outbox == []
    assert engine.state.ops.acl._transient == {}


def test_listener_failure_does_not_break_the_call():
    def _boom(notification):
        raise RuntimeError("observer down")

    engine = build_engine(owner=OWNER, listeners=[_boom])
    assert _register(engine, "0xalice") == 1
    assert engine.get_platform_stats() == (1, 0)


def test_engine_principal_is_reserved():
    engine = _engine()
    _register(engine, "0xalice", location=7)
    profile = engine.state.profiles["0xalice"]
    assert "engine" in engine.state.ops.acl.grantees(profile.encrypted_location.handle)

    with pytest.raises(AccessDenied):
        engine.user_decrypt("engine", profile.encrypted_location)
    with pytest.raises(AccessDenied):
        engine.user_decrypt("engine", profile.encrypted_location.handle)
    with pytest.raises(Unauthorized):
        _register(engine, "engine")
    with pytest.raises(Unauthorized):
        engine.request_match("engine", "0xalice")
    assert engine.get_platform_stats() == (1, 0)


def test_all_digit_principal_cannot_shadow_a_user_id():
    engine = _engine()
    _register(engine, "0xalice", bio="alice bio")
    with pytest.raises(InvalidAttribute):
        _register(engine, "1")
    assert engine.get_public_profile("1")["principal"] == "0xalice"
    assert engine.get_platform_stats() == (1, 0)


def test_notifications_are_published_in_call_order_across_threads():
    captured = []
    engine = _engine(captured)
    threads = [threading.Thread(target=_register, args=(engine, f"0xuser{i:02d}")) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    user_ids = [n.payload["user_id"] for n in captured if n.name == "UserRegistered"]
    assert user_ids == list(range(1, 17))

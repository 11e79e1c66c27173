import pytest

from private_dating.engine import build_engine
from private_dating.errors import (
    AccessDenied,
    AlreadyProcessed,
    DuplicateRequest,
    InvalidAttribute,
    MatchNotFound,
    NotRegistered,
    SelfMatch,
    TargetUnavailable,
    Unauthorized,
)
from private_dating.services.state_machine import MatchStatus


def _engine(captured=None, **kwargs):
    return build_engine(owner="0xowner", listeners=[captured.append] if captured is not None else [], **kwargs)


def _register(engine, principal, age=25, location=1, interests=2, personality=7):
    return engine.register(principal, age, location, interests, personality, "")


def _pair(engine):
    _register(engine, "0xalice", age=25, location=1, interests=2)
    _register(engine, "0xbob", age=27, location=1, interests=2)


def test_request_match_stores_pending_request_with_encrypted_score():
    captured = []
    engine = _engine(captured)
    _pair(engine)
    match_id = engine.request_match("0xalice", "0xbob", message=3)

    assert match_id == 1
    match = engine.get_match_details("0xalice", match_id)
    assert match.status == MatchStatus.PENDING
    assert match.requester == "0xalice"
    assert match.target == "0xbob"
    assert match.is_revealed is False
    assert match.public_score is None
    assert engine.user_decrypt("0xalice", match.encrypted_score) == 100
    assert engine.user_decrypt("0xbob", match.encrypted_message) == 3
    assert captured[-1].name == "MatchRequested"
    assert engine.get_platform_stats() == (2, 0)


def test_score_and_message_are_not_decryptable_by_third_parties():
    engine = _engine()
    _pair(engine)
    _register(engine, "0xcarol")
    match = engine.get_match_details("0xalice", engine.request_match("0xalice", "0xbob"))
    with pytest.raises(AccessDenied):
        engine.user_decrypt("0xcarol", match.encrypted_score)
    with pytest.raises(AccessDenied):
        engine.user_decrypt("0xcarol", match.encrypted_message)


def test_match_ids_increase_monotonically():
    engine = _engine()
    for p in ("0xa", "0xb", "0xc"):
        _register(engine, p)
    ids = [
        engine.request_match("0xa", "0xb"),
        engine.request_match("0xa", "0xc"),
        engine.request_match("0xc", "0xb"),
    ]
    assert ids == [1, 2, 3]


def test_request_match_preconditions():
    engine = _engine()
    _pair(engine)
    with pytest.raises(SelfMatch):
        engine.request_match("0xalice", "0xalice")
    with pytest.raises(NotRegistered):
        engine.request_match("0xalice", "0xghost")
    with pytest.raises(NotRegistered):
        engine.request_match("0xghost", "0xalice")
    with pytest.raises(InvalidAttribute):
        engine.request_match("0xalice", "0xbob", message=256)

    engine.set_looking_for_match("0xbob", False)
    with pytest.raises(TargetUnavailable):
        engine.request_match("0xalice", "0xbob")
    engine.set_looking_for_match("0xbob", True)
    engine.deactivate("0xbob")
    with pytest.raises(TargetUnavailable):
        engine.request_match("0xalice", "0xbob")
    with pytest.raises(Unauthorized):
        engine.request_match("0xbob", "0xalice")

    assert engine.state.requests == {}
    assert engine.state.next_match_id == 1


def test_duplicate_open_request_is_refused():
    engine = _engine()
    _pair(engine)
    engine.request_match("0xalice", "0xbob")
    with pytest.raises(DuplicateRequest):
        engine.request_match("0xalice", "0xbob")


def test_mutual_detection_flags_the_earlier_request_only():
    captured = []
    engine = _engine(captured)
    _pair(engine)
    first = engine.request_match("0xalice", "0xbob")
    second = engine.request_match("0xbob", "0xalice")

    earlier = engine.get_match_details("0xalice", first)
    later = engine.get_match_details("0xbob", second)
    assert earlier.status == MatchStatus.MUTUAL
    assert later.status == MatchStatus.PENDING
    assert len(engine.state.requests) == 2
    assert len(engine.state.rooms) == 1
    assert earlier.room_id in engine.state.rooms
    assert engine.get_platform_stats() == (2, 1)
    assert engine.get_user_chats("0xalice") == engine.get_user_chats("0xbob") == [earlier.room_id]

    names = [n.name for n in captured]
    assert names[-3:] == ["MatchRequested", "ChatRoomCreated", "MutualMatchFound"]


def test_mutual_detection_only_fires_once_per_pair():
    engine = _engine()
    _pair(engine)
    engine.request_match("0xalice", "0xbob")
    engine.request_match("0xbob", "0xalice")
    with pytest.raises(DuplicateRequest):
        engine.request_match("0xalice", "0xbob")
    with pytest.raises(DuplicateRequest):
        engine.request_match("0xbob", "0xalice")
    assert engine.get_platform_stats()[1] == 1
    assert len(engine.state.rooms) == 1


def test_reciprocal_scan_ignores_requests_to_other_people():
    engine = _engine()
    for p in ("0xa", "0xb", "0xc"):
        _register(engine, p)
    engine.request_match("0xb", "0xc")
    engine.request_match("0xa", "0xb")
    assert engine.get_platform_stats()[1] == 0
    engine.request_match("0xb", "0xa")
    assert engine.get_match_details("0xa", 2).status == MatchStatus.MUTUAL
    assert engine.get_match_details("0xb", 1).status == MatchStatus.PENDING


def test_rejection_is_terminal():
    engine = _engine()
    _pair(engine)
    first = engine.request_match("0xalice", "0xbob")
    engine.reject_match("0xbob", first)
    second = engine.request_match("0xbob", "0xalice")

    assert engine.get_match_details("0xalice", first).status == MatchStatus.REJECTED
    assert engine.get_match_details("0xbob", second).status == MatchStatus.PENDING
    assert engine.state.rooms == {}
    assert engine.get_platform_stats()[1] == 0
    with pytest.raises(AlreadyProcessed):
        engine.reject_match("0xbob", first)
    with pytest.raises(AlreadyProcessed):
        engine.accept_match("0xbob", first)


def test_only_target_may_reject_or_accept():
    engine = _engine()
    _pair(engine)
    _register(engine, "0xcarol")
    match_id = engine.request_match("0xalice", "0xbob")
    with pytest.raises(Unauthorized):
        engine.reject_match("0xalice", match_id)
    with pytest.raises(Unauthorized):
        engine.reject_match("0xcarol", match_id)
    with pytest.raises(Unauthorized):
        engine.accept_match("0xalice", match_id)
    with pytest.raises(MatchNotFound):
        engine.reject_match("0xbob", 42)


def test_mutual_request_cannot_be_rejected():
    engine = _engine()
    _pair(engine)
    first = engine.request_match("0xalice", "0xbob")
    engine.request_match("0xbob", "0xalice")
    with pytest.raises(AlreadyProcessed):
        engine.reject_match("0xbob", first)


def test_accept_then_reject_is_refused():
    engine = _engine()
    _pair(engine)
    match_id = engine.request_match("0xalice", "0xbob")
    engine.accept_match("0xbob", match_id)
    with pytest.raises(AlreadyProcessed):
        engine.accept_match("0xbob", match_id)
    with pytest.raises(AlreadyProcessed):
        engine.reject_match("0xbob", match_id)
    match = engine.get_match_details("0xbob", match_id)
    assert match.is_accepted is True
    assert match.accepted_at is not None
    assert match.status == MatchStatus.PENDING


def test_my_matches_and_detail_access():
    engine = _engine()
    for p in ("0xa", "0xb", "0xc"):
        _register(engine, p)
    m1 = engine.request_match("0xa", "0xb")
    m2 = engine.request_match("0xc", "0xa")
    m3 = engine.request_match("0xb", "0xc")
    assert engine.get_my_matches("0xa") == [m1, m2]
    assert engine.get_my_matches("0xb") == [m1, m3]
    assert engine.get_my_matches("0xnobody") == []
    with pytest.raises(Unauthorized):
        engine.get_match_details("0xc", m1)
    with pytest.raises(MatchNotFound):
        engine.get_match_details("0xa", 99)


def test_match_details_are_a_copy():
    engine = _engine()
    _pair(engine)
    match_id = engine.request_match("0xalice", "0xbob")
    details = engine.get_match_details("0xalice", match_id)
    details.status = MatchStatus.REJECTED
    assert engine.get_match_details("0xalice", match_id).status == MatchStatus.PENDING


def test_end_to_end_alice_and_bob():
    engine = _engine()
    _pair(engine)
    users_before, matches_before = engine.get_platform_stats()

    alice_req = engine.request_match("0xalice", "0xbob")
    score = engine.get_match_details("0xalice", alice_req).encrypted_score
    assert engine.user_decrypt("0xbob", score) == 100

    engine.request_match("0xbob", "0xalice")
    assert engine.get_match_details("0xalice", alice_req).status == MatchStatus.MUTUAL
    assert len(engine.get_user_chats("0xalice")) == 1
    assert engine.get_platform_stats() == (users_before, matches_before + 1)

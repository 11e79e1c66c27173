from private_dating.services.state_machine import MatchStatus, transition_status


def test_pending_transitions():
    assert transition_status("pending", "reciprocate") == MatchStatus.MUTUAL
    assert transition_status("pending", "reject") == MatchStatus.REJECTED
    assert transition_status("pending", "view") == MatchStatus.PENDING


def test_mutual_and_rejected_are_terminal():
    for action in ("reciprocate", "reject", "view"):
        assert transition_status("mutual", action) == MatchStatus.MUTUAL
        assert transition_status("rejected", action) == MatchStatus.REJECTED


def test_enum_values_round_trip_as_strings():
    assert transition_status(MatchStatus.PENDING, "reject") == "rejected"
    assert MatchStatus("mutual") is MatchStatus.MUTUAL

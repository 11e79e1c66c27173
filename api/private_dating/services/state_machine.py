from enum import Enum


class MatchStatus(str, Enum):
    PENDING = "pending"
    MUTUAL = "mutual"
    REJECTED = "rejected"


def transition_status(current: str, action: str) -> MatchStatus:
    if current in {MatchStatus.MUTUAL, MatchStatus.REJECTED}:
        return MatchStatus(current)

    if action == "reciprocate":
        if current == MatchStatus.PENDING:
            return MatchStatus.MUTUAL
        return MatchStatus(current)

    if action == "reject":
        if current == MatchStatus.PENDING:
            return MatchStatus.REJECTED
        return MatchStatus(current)

    return MatchStatus(current)

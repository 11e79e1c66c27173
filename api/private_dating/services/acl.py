from collections import defaultdict

from ..errors import AccessDenied


class AccessControlList:
    """(handle, principal) decrypt/compute permissions.

    Persistent grants are append-only and never revoked. Transient grants
    cover intermediate ciphertexts produced inside a single engine call and
    are dropped by ``clear_transient`` when that call ends.
    """

    def __init__(self) -> None:
        self._grants: dict[str, set[str]] = defaultdict(set)
        self._transient: dict[str, set[str]] = defaultdict(set)

    def grant(self, handle: str, principal: str) -> None:
        self._grants[handle].add(principal)

    def grant_transient(self, handle: str, principal: str) -> None:
        self._transient[handle].add(principal)

    def is_allowed(self, handle: str, principal: str) -> bool:
        return principal in self._grants.get(handle, ()) or principal in self._transient.get(handle, ())

    def is_persistently_allowed(self, handle: str, principal: str) -> bool:
        return principal in self._grants.get(handle, ())

    def require(self, handle: str, principal: str) -> None:
        if not self.is_allowed(handle, principal):
            raise AccessDenied(f"{principal} has no access to ciphertext handle {handle}")

    def grantees(self, handle: str) -> set[str]:
        return set(self._grants.get(handle, ()))

    def clear_transient(self) -> None:
        self._transient.clear()

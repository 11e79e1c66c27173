"""In-process reference co-processor.

Stands in for the external FHE co-processor in development and tests. It
keeps plaintexts behind random opaque handles, implements wrapping 8-bit
arithmetic, and answers reveal requests asynchronously: requests queue up
until ``drain`` is called, which returns signed ``RevealResponse`` objects for
the caller to deliver to the engine's reveal callback.
"""

import logging
import secrets
import threading

from ..auth.security import sign_reveal_result
from .ciphertext import CipherKind, RevealResponse, encode_cleartext

logger = logging.getLogger(__name__)

UINT8_MODULUS = 256


class LocalCoProcessor:
    def __init__(self, signing_key: str) -> None:
        self._signing_key = signing_key
        self._values: dict[str, tuple[CipherKind, int]] = {}
        self._pending: list[tuple[int, str]] = []
        self._lock = threading.Lock()

    def _store(self, kind: CipherKind, value: int) -> str:
        handle = "0x" + secrets.token_hex(32)
        with self._lock:
            self._values[handle] = (kind, value)
        return handle

    def _load(self, handle: str) -> int:
        try:
            return self._values[handle][1]
        except KeyError:
            raise KeyError(f"unknown ciphertext handle {handle}") from None

    def encrypt(self, value: int, kind: CipherKind) -> str:
        if kind == CipherKind.BOOL:
            return self._store(kind, 1 if value else 0)
        return self._store(kind, int(value) % UINT8_MODULUS)

    def binary_op(self, op: str, lhs: str, rhs: str | int) -> str:
        a = self._load(lhs)
        b = self._load(rhs) if isinstance(rhs, str) else int(rhs)
        if op == "add":
            return self._store(CipherKind.UINT8, (a + b) % UINT8_MODULUS)
        if op == "sub":
            return self._store(CipherKind.UINT8, (a - b) % UINT8_MODULUS)
        if op == "eq":
            return self._store(CipherKind.BOOL, int(a == b))
        if op == "le":
            return self._store(CipherKind.BOOL, int(a <= b))
        if op == "lt":
            return self._store(CipherKind.BOOL, int(a < b))
        if op == "gt":
            return self._store(CipherKind.BOOL, int(a > b))
        raise ValueError(f"unsupported homomorphic op: {op}")

    def select(self, cond: str, then_handle: str, else_handle: str) -> str:
        chosen = then_handle if self._load(cond) else else_handle
        kind, value = self._values[chosen]
        return self._store(kind, value)

    def request_reveal(self, handle: str, correlation_id: int) -> None:
        self._load(handle)
        with self._lock:
            self._pending.append((correlation_id, handle))
        logger.debug("[coprocessor] reveal queued correlation_id=%s", correlation_id)

    def decrypt(self, handle: str) -> int:
        return self._load(handle)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def drain(self) -> list[RevealResponse]:
        with self._lock:
            pending, self._pending = self._pending, []
        out = []
        for correlation_id, handle in pending:
            cleartext = encode_cleartext(self._load(handle))
            proof = sign_reveal_result(correlation_id, cleartext, self._signing_key)
            out.append(RevealResponse(correlation_id=correlation_id, cleartext=cleartext, proof=proof))
        return out

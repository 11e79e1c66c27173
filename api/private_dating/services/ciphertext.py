"""Ciphertext handles and the homomorphic operation set the engine relies on.

The engine never sees plaintext. It holds ``EncryptedValue`` handles and asks
a ``CoProcessor`` to combine them. ``CipherOps`` sits in front of the
co-processor and enforces the ACL: an operand must be granted to the engine
principal before any operation may reference it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar, Union

from ..errors import AccessDenied
from .acl import AccessControlList

T = TypeVar("T", int, bool)


class CipherKind(str, Enum):
    UINT8 = "euint8"
    BOOL = "ebool"


@dataclass(frozen=True)
class EncryptedValue(Generic[T]):
    handle: str
    kind: CipherKind


EUint8 = EncryptedValue[int]
EBool = EncryptedValue[bool]

Operand = Union[EncryptedValue, int]


@dataclass(frozen=True)
class RevealResponse:
    correlation_id: int
    cleartext: str
    proof: str


def encode_cleartext(value: int) -> str:
    return int(value).to_bytes(32, "big").hex()


def decode_cleartext(cleartext: str) -> int:
    raw = bytes.fromhex(cleartext.removeprefix("0x"))
    if len(raw) != 32:
        raise ValueError(f"cleartext must be 32 bytes, got {len(raw)}")
    return int.from_bytes(raw, "big")


class CoProcessor(Protocol):
    def encrypt(self, value: int, kind: CipherKind) -> str:
        ...

    def binary_op(self, op: str, lhs: str, rhs: str | int) -> str:
        ...

    def select(self, cond: str, then_handle: str, else_handle: str) -> str:
        ...

    def request_reveal(self, handle: str, correlation_id: int) -> None:
        ...

    def decrypt(self, handle: str) -> int:
        ...


COMPARISON_OPS = {"eq", "le", "lt", "gt"}


class CipherOps:
    def __init__(self, coprocessor: CoProcessor, acl: AccessControlList, engine_principal: str):
        self.coprocessor = coprocessor
        self.acl = acl
        self.engine_principal = engine_principal

    def _produced(self, handle: str, kind: CipherKind) -> EncryptedValue:
        self.acl.grant_transient(handle, self.engine_principal)
        return EncryptedValue(handle=handle, kind=kind)

    def _check(self, *values: EncryptedValue) -> None:
        for v in values:
            self.acl.require(v.handle, self.engine_principal)

    def encrypt_u8(self, value: int) -> EUint8:
        if not 0 <= int(value) <= 255:
            raise ValueError(f"value {value} does not fit in euint8")
        return self._produced(self.coprocessor.encrypt(int(value), CipherKind.UINT8), CipherKind.UINT8)

    def encrypt_bool(self, value: bool) -> EBool:
        return self._produced(self.coprocessor.encrypt(1 if value else 0, CipherKind.BOOL), CipherKind.BOOL)

    def _binary(self, op: str, lhs: EncryptedValue, rhs: Operand) -> EncryptedValue:
        if isinstance(rhs, EncryptedValue):
            self._check(lhs, rhs)
            rhs_arg: str | int = rhs.handle
        else:
            self._check(lhs)
            rhs_arg = int(rhs)
        kind = CipherKind.BOOL if op in COMPARISON_OPS else CipherKind.UINT8
        return self._produced(self.coprocessor.binary_op(op, lhs.handle, rhs_arg), kind)

    def add(self, lhs: EUint8, rhs: Operand) -> EUint8:
        return self._binary("add", lhs, rhs)

    def sub(self, lhs: EUint8, rhs: Operand) -> EUint8:
        return self._binary("sub", lhs, rhs)

    def eq(self, lhs: EUint8, rhs: Operand) -> EBool:
        return self._binary("eq", lhs, rhs)

    def le(self, lhs: EUint8, rhs: Operand) -> EBool:
        return self._binary("le", lhs, rhs)

    def lt(self, lhs: EUint8, rhs: Operand) -> EBool:
        return self._binary("lt", lhs, rhs)

    def gt(self, lhs: EUint8, rhs: Operand) -> EBool:
        return self._binary("gt", lhs, rhs)

    def select(self, cond: EBool, then_value: Operand, else_value: Operand) -> EUint8:
        if not isinstance(then_value, EncryptedValue):
            then_value = self.encrypt_u8(then_value)
        if not isinstance(else_value, EncryptedValue):
            else_value = self.encrypt_u8(else_value)
        self._check(cond, then_value, else_value)
        handle = self.coprocessor.select(cond.handle, then_value.handle, else_value.handle)
        return self._produced(handle, then_value.kind)

    def grant_self_access(self, value: EncryptedValue) -> None:
        self.acl.grant(value.handle, self.engine_principal)

    def grant_access(self, value: EncryptedValue, principal: str) -> None:
        self.acl.grant(value.handle, principal)

    def request_reveal(self, value: EncryptedValue, correlation_id: int) -> None:
        self._check(value)
        self.coprocessor.request_reveal(value.handle, correlation_id)

    def user_decrypt(self, value: EncryptedValue, principal: str) -> int:
        if principal == self.engine_principal:
            raise AccessDenied(f"{principal} is reserved for the engine and cannot decrypt")
        if not self.acl.is_persistently_allowed(value.handle, principal):
            raise AccessDenied(f"{principal} may not decrypt ciphertext handle {value.handle}")
        return self.coprocessor.decrypt(value.handle)

"""Encrypted compatibility scoring.

``compute_score`` is a straight-line chain of homomorphic calls: the same
operations run in the same order whatever the inputs are, so the execution
trace says nothing about the attributes being compared.

    age_close = |age_a - age_b| <= window       -> AGE_W
    loc_match = location_a == location_b        -> LOCATION_W
    int_match = interests_a == interests_b      -> INTERESTS_W

With the default weights (30/40/30) the score lies in [0, 100].
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ciphertext import CipherOps, EBool, EUint8

if TYPE_CHECKING:
    from .profiles import Profile


def age_distance(ops: CipherOps, age_a: EUint8, age_b: EUint8, symmetric: bool = True) -> EUint8:
    if not symmetric:
        # legacy: wraps when age_a < age_b
        return ops.sub(age_a, age_b)
    return ops.select(ops.gt(age_a, age_b), ops.sub(age_a, age_b), ops.sub(age_b, age_a))


def age_closeness(ops: CipherOps, age_a: EUint8, age_b: EUint8, window: int, symmetric: bool = True) -> EBool:
    return ops.le(age_distance(ops, age_a, age_b, symmetric), window)


def compute_score(
    ops: CipherOps,
    profile_a: Profile,
    profile_b: Profile,
    weights: dict[str, int],
    age_window: int = 5,
    symmetric_age: bool = True,
) -> EUint8:
    age_close = age_closeness(ops, profile_a.encrypted_age, profile_b.encrypted_age, age_window, symmetric_age)
    loc_match = ops.eq(profile_a.encrypted_location, profile_b.encrypted_location)
    int_match = ops.eq(profile_a.encrypted_interests, profile_b.encrypted_interests)

    age_points = ops.select(age_close, weights["AGE_W"], 0)
    loc_points = ops.select(loc_match, weights["LOCATION_W"], 0)
    int_points = ops.select(int_match, weights["INTERESTS_W"], 0)
    return ops.add(ops.add(age_points, loc_points), int_points)

"""
Tiercé / Quinté probabilities (Harville / Plackett–Luce removal model).

Input:
  - win probability per entrant (normalized here if the sum is not 1)

Output:
  - ordered (tiercé ordre): P(i,j,k) = p_i * p_j/(1-p_i) * p_k/(1-p_i-p_j)
  - unordered set: P({a,b,c}) = Σ_{perm} P(perm)
  - quinté set: exact Σ over 120 orders, or one order x 5! (approximation)
"""

from __future__ import annotations

from itertools import combinations, permutations
from math import factorial
from typing import Hashable, Sequence

import numpy as np

_EPS = 1e-9


def normalize_probs(p: dict[Hashable, float], *, eps: float = 1e-12) -> dict[Hashable, float]:
    """
    Clip p to non-negative values and normalize (uniform if the sum is 0).
    """
    keys = list(p.keys())
    vals = np.array([float(p[k]) for k in keys], dtype=float)
    vals = np.where(np.isfinite(vals), vals, 0.0)
    vals = np.maximum(vals, 0.0)
    s = float(vals.sum())
    if s <= eps:
        if not keys:
            return {}
        u = 1.0 / float(len(keys))
        return {k: u for k in keys}
    vals = vals / s
    return {k: float(v) for k, v in zip(keys, vals)}


def _checked(p: dict[Hashable, float], k: Hashable) -> float:
    v = float(p.get(k, 0.0))
    if not (-_EPS <= v <= 1.0 + _EPS):
        raise ValueError(f"probability out of [0, 1] for {k!r}: {v}")
    return v


def pl_prob_order(p: dict[Hashable, float], order: Sequence[Hashable]) -> float:
    """
    Probability that `order` fills the first len(order) places, in order.

    Each step divides by the mass left after removing the entrants already
    placed; a non-positive remaining mass gives 0.
    """
    if len(set(order)) != len(order):
        return 0.0
    prob = 1.0
    remaining = 1.0
    for k in order:
        pk = _checked(p, k)
        if pk <= 0 or remaining <= 0:
            return 0.0
        prob *= pk / remaining
        remaining -= pk
    return float(prob)


def pl_step_probs(p: dict[Hashable, float], order: Sequence[Hashable]) -> list[float]:
    """The conditional factors of pl_prob_order, one per placed entrant."""
    steps: list[float] = []
    remaining = 1.0
    for k in order:
        pk = _checked(p, k)
        steps.append(pk / remaining if remaining > 0 and pk > 0 else 0.0)
        remaining -= pk
    return steps


def pl_prob_top3_order(p: dict[Hashable, float], i: Hashable, j: Hashable, k: Hashable) -> float:
    """
    PL/Harville ordered trio (i -> j -> k).

    P(i,j,k) = p_i * p_j/(1-p_i) * p_k/(1-p_i-p_j)
    """
    return pl_prob_order(p, (i, j, k))


def pl_prob_set(p: dict[Hashable, float], members: Sequence[Hashable]) -> float:
    """Exact probability that `members` fill the first places in any order."""
    return float(sum(pl_prob_order(p, perm) for perm in permutations(members)))


def pl_prob_set_approx(p: dict[Hashable, float], members: Sequence[Hashable]) -> float:
    """
    One ordering x n! (the order given).

    Cheap, but not the exact set probability: it over-rates sets ordered
    favourite-first and is capped at 1.
    """
    return float(min(1.0, pl_prob_order(p, members) * factorial(len(members))))


def pl_all_top3_order_probs(p: dict[Hashable, float]) -> dict[tuple, float]:
    """
    Ordered trio probability of every (i,j,k).
    """
    p2 = normalize_probs(p)
    ks = list(p2.keys())
    out: dict[tuple, float] = {}
    for i, j, k in permutations(ks, 3):
        out[(i, j, k)] = pl_prob_top3_order(p2, i, j, k)
    return out


def pl_all_trio_set_probs(p: dict[Hashable, float]) -> dict[tuple, float]:
    """
    Unordered trio probability of every {a,b,c} (keys in insertion order).
    """
    p2 = normalize_probs(p)
    ks = list(p2.keys())
    out: dict[tuple, float] = {}
    for a, b, c in combinations(ks, 3):
        out[(a, b, c)] = pl_prob_set(p2, (a, b, c))
    return out


def sum_probs(d: dict) -> float:
    return float(sum(float(v) for v in d.values()))

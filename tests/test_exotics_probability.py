import math
import random

import pytest


def test_pl_top3_order_probs_sum_to_one():
    from hippique.exotics.probability import pl_all_top3_order_probs, sum_probs

    random.seed(42)
    n = 10
    raw = [random.random() for _ in range(n)]
    s = sum(raw)
    p = {i + 1: raw[i] / s for i in range(n)}  # saddle numbers 1..n

    probs = pl_all_top3_order_probs(p)
    total = sum_probs(probs)
    assert math.isfinite(total)
    assert abs(total - 1.0) < 1e-9


def test_pl_trio_set_probs_sum_to_one():
    from hippique.exotics.probability import pl_all_trio_set_probs, sum_probs

    random.seed(123)
    n = 12
    raw = [random.random() for _ in range(n)]
    s = sum(raw)
    p = {i + 1: raw[i] / s for i in range(n)}

    probs = pl_all_trio_set_probs(p)
    total = sum_probs(probs)
    assert math.isfinite(total)
    assert abs(total - 1.0) < 1e-9


def test_three_horse_oracle():
    from hippique.exotics.probability import pl_prob_set, pl_prob_top3_order, pl_step_probs

    p = {"a": 0.5, "b": 0.3, "c": 0.2}
    # 0.5 * 0.3/0.5 * 0.2/0.2
    assert pl_prob_top3_order(p, "a", "b", "c") == pytest.approx(0.3)
    assert pl_step_probs(p, ("a", "b", "c")) == pytest.approx([0.5, 0.6, 1.0])
    assert pl_prob_set(p, ("a", "b", "c")) == pytest.approx(1.0)


def test_set_approx_is_capped():
    from hippique.exotics.probability import pl_prob_set_approx

    p = {"a": 0.5, "b": 0.3, "c": 0.2}
    # 0.3 * 3! > 1
    assert pl_prob_set_approx(p, ("a", "b", "c")) == 1.0


def test_repeated_entrant_has_zero_probability():
    from hippique.exotics.probability import pl_prob_order

    assert pl_prob_order({"a": 0.5, "b": 0.5}, ("a", "a")) == 0.0


def test_out_of_range_probability_raises():
    from hippique.exotics.probability import pl_prob_order

    with pytest.raises(ValueError):
        pl_prob_order({"a": 1.5, "b": 0.1}, ("a", "b"))


def test_normalize_probs():
    from hippique.exotics.probability import normalize_probs

    assert normalize_probs({1: 0.0, 2: 0.0}) == {1: 0.5, 2: 0.5}
    assert normalize_probs({1: 30.0, 2: 10.0, 3: -5.0}) == pytest.approx({1: 0.75, 2: 0.25, 3: 0.0})
    assert normalize_probs({}) == {}

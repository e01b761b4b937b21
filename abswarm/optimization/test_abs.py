# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import pytest
import numpy as np
from abswarm.common import errors
from abswarm.common import testing
from . import abs as abs_
from .abs import Action
from .layers import Layer


def _make_layer(alpha_er: int = 0, alpha_ei: int = 0, beta: int = 0) -> Layer:
    layer = Layer.seed(np.zeros(3), np.zeros(3), 12.0)
    layer.er.alpha = alpha_er
    layer.ei.alpha = alpha_ei
    layer.beta = beta
    return layer


@testing.parametrized(
    start=(0, 2000, 5, (5, 0)),
    end=(2000, 2000, 5, (0, 5)),
    middle=(1000, 2000, 5, (3, 2)),
    third=(1, 3, 6, (4, 2)),
    small=(1, 2000, 6, (6, 0)),
    almost_end=(1999, 2000, 6, (1, 5)),
    zero_total=(10, 20, 0, (0, 0)),
)
def test_thresholds(num_evaluations: int, budget: int, total: int, expected: tuple) -> None:
    assert abs_.thresholds(num_evaluations, budget, total) == expected


@testing.parametrized(
    long=(2000, 5),
    short=(7, 6),
    coprime=(97, 13),
)
def test_thresholds_monotonicity(budget: int, total: int) -> None:
    values = np.array([abs_.thresholds(k, budget, total) for k in range(budget + 1)])
    m_er, m_ei = values[:, 0], values[:, 1]
    assert np.all(np.diff(m_er) <= 0), "M_Er must not increase"
    assert np.all(np.diff(m_ei) >= 0), "M_Ei must not decrease"
    assert (m_er[0], m_ei[0]) == (total, 0)
    assert (m_er[-1], m_ei[-1]) == (0, total)
    assert np.all(m_er >= 0) and np.all(m_ei <= total)


@testing.parametrized(
    zero_budget=(0, 0, 5),
    negative_total=(0, 10, -1),
    negative_evaluations=(-1, 10, 5),
)
def test_thresholds_errors(num_evaluations: int, budget: int, total: int) -> None:
    with pytest.raises(errors.AbsValueError):
        abs_.thresholds(num_evaluations, budget, total)


@testing.parametrized(
    fresh=(0, 0, 0, 3, 2, Action.EXPLORE),
    explore_at_limit=(3, 0, 1, 3, 2, Action.EXPLORE),
    explore_stalled_after_improvement=(4, 0, 1, 3, 2, Action.RECONSTRUCT),
    exploit_stalled=(0, 3, 0, 3, 2, Action.RECONSTRUCT),
    exploit_stalled_with_beta=(1, 3, 2, 3, 2, Action.RECONSTRUCT),
    explore_exhausted_without_improvement=(4, 1, 0, 3, 2, Action.EXPLOIT),
    exploit_at_limit=(4, 2, 0, 3, 2, Action.EXPLOIT),
    zero_thresholds=(0, 0, 0, 0, 0, Action.EXPLORE),
    end_of_run=(1, 0, 0, 0, 6, Action.EXPLOIT),
)
def test_select_action(alpha_er: int, alpha_ei: int, beta: int, m_er: int, m_ei: int, expected: Action) -> None:
    layer = _make_layer(alpha_er, alpha_ei, beta)
    action = abs_.select_action(layer, m_er, m_ei)
    assert action == expected
    # pure: same result again, counters untouched
    assert abs_.select_action(layer, m_er, m_ei) == action
    assert layer.counters() == {"alpha_er": alpha_er, "alpha_ei": alpha_ei, "beta": beta}


def test_select_action_after_reset() -> None:
    for m_er in range(4):
        for m_ei in range(4):
            layer = _make_layer(7, 7, 3)
            layer.reset_counters()
            assert abs_.select_action(layer, m_er, m_ei) == Action.EXPLORE


def test_adaptive_bi_strategy() -> None:
    strategy = abs_.AdaptiveBiStrategy(6)
    assert strategy.thresholds(0, 100) == (6, 0)
    assert strategy.thresholds(50, 100) == (3, 3)
    assert strategy.select_action(_make_layer(), 6, 0) == Action.EXPLORE
    assert repr(strategy) == "AdaptiveBiStrategy(total=6)"
    for total in [-1, 2.5, None, "6", True, float("nan"), float("inf")]:
        with pytest.raises(errors.AbsValueError):
            abs_.AdaptiveBiStrategy(total)  # type: ignore

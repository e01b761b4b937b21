# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import pytest
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.common import testing
from abswarm.functions import benchmarks
from . import experiments


OPTIMS = ["CHpPSO_ABS", "CHCLPSO_ABS"]


def test_registry() -> None:
    assert {"basic", "cec2013", "cec2017"} <= set(experiments.registry)


def test_basic_plan() -> None:
    xps = list(experiments.basic(seed=12, dimension=3, budget_factor=20, optimizers=OPTIMS))
    assert len(xps) == 8
    assert [xp.function.name for xp in xps[::2]] == ["sphere", "rastrigin", "rosenbrock", "ackley"]
    assert {xp.optimizer.name for xp in xps} == {"CHpPSO_ABS", "CHCLPSO_ABS"}
    assert all(xp.budget == 60 and xp.dimension == 3 for xp in xps)
    assert len({xp.seed for xp in xps}) == 8
    assert xps[0].function.lower == -100.0
    seeds = [xp.seed for xp in experiments.basic(seed=12, dimension=3, budget_factor=20, optimizers=OPTIMS)]
    assert seeds == [xp.seed for xp in xps]


def test_basic_plan_default_optimizer() -> None:
    xps = list(experiments.basic(dimension=2, budget_factor=10))
    assert len(xps) == 4
    assert all(xp.optimizer.name == "CHCLPSO_ABS" and xp.seed is None for xp in xps)


@testing.parametrized(
    popsize=(7, None, 7, 6),
    threshold=(None, 3, 20, 3),
    both=(7, 3, 7, 3),
)
def test_get_optimizers_overrides(
    popsize: tp.Optional[int], threshold: tp.Optional[int], expected_popsize: int, expected_threshold: int
) -> None:
    optim = experiments.get_optimizers(["CHCLPSO_ABS"], popsize=popsize, threshold=threshold)[0]
    assert optim.name == "CHCLPSO_ABS"
    config = optim.config()
    assert config["exemplar"] == "comprehensive"
    assert config["popsize"] == expected_popsize
    assert config["threshold"] == expected_threshold


def test_get_optimizers_without_override() -> None:
    optims = experiments.get_optimizers(["CHpPSO_ABS"])
    assert optims[0] is experiments.optimizerlib.registry["CHpPSO_ABS"]


@testing.parametrized(
    cec2013=("cec2013", 28),
    cec2017=("cec2017", 29),
)
def test_cec_plans(name: str, num_functions: int) -> None:
    plan = experiments.registry[name]
    with pytest.raises(errors.UnsupportedExperiment):
        next(plan(dimension=10))
    benchmarks.cec_evaluators.register_name(name, lambda x, number: float(number + np.sum(x)))
    try:
        xps = list(plan(seed=12, dimension=10, budget_factor=5))
    finally:
        benchmarks.cec_evaluators.unregister(name)
    assert len(xps) == num_functions
    assert all(xp.budget == 50 for xp in xps)
    assert xps[-1].function.name == f"{name}_f{30 if name == 'cec2017' else 28}"


def test_get_optimizers_unknown_name() -> None:
    with pytest.raises(errors.AbsValueError, match="Unknown optimizer"):
        experiments.get_optimizers(["Blublu"])

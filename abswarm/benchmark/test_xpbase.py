# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import itertools
import pytest
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.functions import BenchmarkFunction
from abswarm.functions import CECFunction
from abswarm.functions import benchmarks
from abswarm.optimization import optimizerlib
from . import xpbase


DESCRIPTION_KEYS = {
    "function",
    "optimizer",
    "dimension",
    "budget",
    "seed",
    "loss",
    "error",
    "elapsed_time",
    "num_evaluations",
    "failure",
}


def test_run_sphere() -> None:
    func = BenchmarkFunction("shifted_sphere", lambda x: float(np.sum((x - 1) ** 2)) + 3.0, -5, 5, optimum=3.0)
    xp = xpbase.Experiment(func, "CHpPSO_ABS", dimension=2, budget=200, seed=12)
    summary = xp.run()
    assert set(summary) == DESCRIPTION_KEYS
    assert summary["function"] == "shifted_sphere"
    assert summary["optimizer"] == "CHpPSO_ABS"
    assert summary["num_evaluations"] == 200
    assert summary["failure"] == ""
    assert summary["seed"] == 12
    assert summary["loss"] >= 3.0
    np.testing.assert_almost_equal(summary["error"], summary["loss"] - 3.0)
    assert xp.recommendation is not None
    assert summary["loss"] == xp.recommendation.loss


def test_seeded_runs_are_reproducible() -> None:
    func = BenchmarkFunction.from_registry("rastrigin")
    losses = [
        xpbase.Experiment(func, optimizerlib.CHCLPSO_ABS, dimension=3, budget=150, seed=seed).run()["loss"]
        for seed in [12, 12, 13]
    ]
    assert losses[0] == losses[1]
    assert losses[0] != losses[2]


def test_run_with_error() -> None:
    def failing(x: np.ndarray) -> float:
        raise ValueError("Failing")

    func = BenchmarkFunction("failing", failing, -1, 1)
    xp = xpbase.Experiment(func, "CHpPSO_ABS", dimension=2, budget=10)
    summary = xp.run()
    assert summary["failure"] == "ValueError"
    assert summary["num_evaluations"] == 1
    assert np.isnan(summary["loss"])
    assert summary["seed"] == -1


def test_unsupported_experiment_is_raised() -> None:
    def unsupported(x: np.ndarray) -> float:
        raise errors.UnsupportedExperiment("Not available")

    xp = xpbase.Experiment(BenchmarkFunction("unsupported", unsupported, -1, 1), "CHpPSO_ABS", 2, 10)
    with pytest.raises(errors.UnsupportedExperiment):
        xp.run()


def test_configuration_errors() -> None:
    func = BenchmarkFunction.from_registry("sphere")
    with pytest.raises(errors.AbsValueError, match="Unknown optimizer"):
        xpbase.Experiment(func, "Blublu", dimension=2, budget=10)
    with pytest.raises(errors.AbsTypeError):
        xpbase.Experiment(np.sum, "CHpPSO_ABS", dimension=2, budget=10)  # type: ignore


def test_cec_function_experiment() -> None:
    calls: tp.List[int] = []

    def evaluator(x: np.ndarray, number: int) -> float:
        calls.append(number)
        return 300.0 + float(np.sum(x**2))

    benchmarks.cec_evaluators.register_name("cec2017", evaluator)
    try:
        xp = xpbase.Experiment(CECFunction("cec2017", 3, 4), "CHpPSO_ABS", dimension=4, budget=40, seed=12)
        summary = xp.run()
    finally:
        benchmarks.cec_evaluators.unregister("cec2017")
    assert summary["function"] == "cec2017_f3"
    assert summary["failure"] == ""
    assert calls == [3] * 40
    np.testing.assert_almost_equal(summary["error"], summary["loss"] - 300.0)


def test_create_seed_generator() -> None:
    assert list(itertools.islice(xpbase.create_seed_generator(None), 3)) == [None] * 3
    seeds = list(itertools.islice(xpbase.create_seed_generator(12), 3))
    assert seeds == list(itertools.islice(xpbase.create_seed_generator(12), 3))
    assert all(isinstance(s, int) for s in seeds)
    assert len(set(seeds)) == 3

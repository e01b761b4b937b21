# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.functions import benchmarks
from abswarm.functions import BenchmarkFunction
from abswarm.functions import CECFunction
from abswarm.optimization import optimizerlib
from .xpbase import Experiment as Experiment
from .xpbase import create_seed_generator
from .xpbase import registry as registry  # noqa


DEFAULT_OPTIMIZERS = ("CHCLPSO_ABS",)


def get_optimizers(
    names: tp.Sequence[str], popsize: tp.Optional[int] = None, threshold: tp.Optional[int] = None
) -> tp.List[optimizerlib.ConfCHxPSO]:
    """Fetches registered optimizers, overriding their population size and/or threshold if provided.
    Overridden optimizers keep their registered name.
    """
    optims = []
    for name in names:
        if name not in optimizerlib.registry:
            raise errors.AbsValueError(f'Unknown optimizer "{name}" (available: {sorted(optimizerlib.registry)})')
        optim = optimizerlib.registry[name]
        overrides = {
            key: value for key, value in [("popsize", popsize), ("threshold", threshold)] if value is not None
        }
        if overrides:
            optim = optimizerlib.ConfCHxPSO(**dict(optim.config(), **overrides)).set_name(name)
        optims.append(optim)
    return optims


def _experiments(
    functions: tp.Iterable[BenchmarkFunction],
    seed: tp.Optional[int],
    dimension: int,
    popsize: tp.Optional[int],
    budget_factor: int,
    threshold: tp.Optional[int],
    optimizers: tp.Sequence[str],
) -> tp.Iterator[Experiment]:
    seedg = create_seed_generator(seed)
    optims = get_optimizers(optimizers, popsize=popsize, threshold=threshold)
    for func in functions:
        for optim in optims:
            yield Experiment(func, optim, dimension=dimension, budget=budget_factor * dimension, seed=next(seedg))


# pylint: disable=too-many-arguments
@registry.register
def basic(
    seed: tp.Optional[int] = None,
    dimension: int = 10,
    popsize: tp.Optional[int] = None,
    budget_factor: int = 10000,
    threshold: tp.Optional[int] = None,
    optimizers: tp.Sequence[str] = DEFAULT_OPTIMIZERS,
) -> tp.Iterator[Experiment]:
    """Sphere, Rastrigin, Rosenbrock and Ackley with their classical bounds.
    The budget is budget_factor * dimension evaluations.
    """
    functions = [BenchmarkFunction.from_registry(name) for name in ["sphere", "rastrigin", "rosenbrock", "ackley"]]
    yield from _experiments(functions, seed, dimension, popsize, budget_factor, threshold, optimizers)


@registry.register
def cec2013(
    seed: tp.Optional[int] = None,
    dimension: int = 10,
    popsize: tp.Optional[int] = None,
    budget_factor: int = 10000,
    threshold: tp.Optional[int] = None,
    optimizers: tp.Sequence[str] = DEFAULT_OPTIMIZERS,
) -> tp.Iterator[Experiment]:
    """The 28 functions of the CEC2013 suite.
    An evaluator must be registered in abswarm.functions.benchmarks.cec_evaluators under "cec2013".
    """
    functions = [CECFunction("cec2013", number, dimension) for number in benchmarks.CEC2013_FUNCTIONS]
    yield from _experiments(functions, seed, dimension, popsize, budget_factor, threshold, optimizers)


@registry.register
def cec2017(
    seed: tp.Optional[int] = None,
    dimension: int = 10,
    popsize: tp.Optional[int] = None,
    budget_factor: int = 10000,
    threshold: tp.Optional[int] = None,
    optimizers: tp.Sequence[str] = DEFAULT_OPTIMIZERS,
) -> tp.Iterator[Experiment]:
    """The 29 functions of the CEC2017 suite (F2 excluded).
    An evaluator must be registered in abswarm.functions.benchmarks.cec_evaluators under "cec2017".
    """
    functions = [CECFunction("cec2017", number, dimension) for number in benchmarks.CEC2017_FUNCTIONS]
    yield from _experiments(functions, seed, dimension, popsize, budget_factor, threshold, optimizers)

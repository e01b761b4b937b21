# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
#
# Bounds and optimal values follow the definitions of:
# J. J. Liang, B. Y. Qu, P. N. Suganthan, A. G. Hernandez-Diaz,
# "Problem Definitions and Evaluation Criteria for the CEC 2013 Special Session on
# Real-Parameter Optimization", Technical Report, 2013.
# N. H. Awad, M. Z. Ali, J. J. Liang, B. Y. Qu, P. N. Suganthan,
# "Problem Definitions and Evaluation Criteria for the CEC 2017 Special Session and
# Competition on Single Objective Real-Parameter Numerical Optimization", Technical Report, 2016.

import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.common.decorators import Registry
from . import corefuncs


# evaluator(x, function_number) -> loss, provided by external CEC code
CECEvaluator = tp.Callable[[np.ndarray, int], float]
cec_evaluators: Registry[CECEvaluator] = Registry()

CEC2013_FUNCTIONS = tuple(range(1, 29))
CEC2017_FUNCTIONS = (1,) + tuple(range(3, 31))  # F2 was withdrawn from the suite


def basic_bounds(name: str) -> tp.Tuple[float, float]:
    """Search bounds of the analytic functions of corefuncs"""
    info = corefuncs.registry.get_info(name)
    return info["lower"], info["upper"]


def cec2013_bounds(number: int) -> tp.Tuple[float, float]:
    _check_number(number, CEC2013_FUNCTIONS, "CEC2013")
    if number <= 5:
        return -100.0, 100.0
    if number <= 20:
        return -5.0, 5.0
    return -32.0, 32.0


def cec2013_optimum(number: int) -> float:
    """F1 to F14 have optima -1400 to -100, F15 to F28 have optima 100 to 1400"""
    _check_number(number, CEC2013_FUNCTIONS, "CEC2013")
    if number <= 14:
        return -1400.0 + 100.0 * (number - 1)
    return 100.0 * (number - 14)


def cec2017_bounds(number: int) -> tp.Tuple[float, float]:
    _check_number(number, CEC2017_FUNCTIONS, "CEC2017")
    return -100.0, 100.0


def cec2017_optimum(number: int) -> float:
    _check_number(number, CEC2017_FUNCTIONS, "CEC2017")
    return 100.0 * number


def _check_number(number: int, available: tp.Sequence[int], suite: str) -> None:
    if number not in available:
        raise errors.AbsValueError(f"{suite} has no function number {number} (available: {list(available)})")


class BenchmarkFunction:
    """Objective function along with its search bounds and known optimal value

    Parameters
    ----------
    name: str
        name of the function (used in benchmark reports)
    function: callable
        function mapping a 1d array to a float loss
    lower: float
        lower bound of each coordinate of the search space
    upper: float
        upper bound of each coordinate of the search space
    optimum: float
        known optimal loss, used for computing errors
    """

    def __init__(
        self, name: str, function: tp.Callable[[np.ndarray], float], lower: float, upper: float, optimum: float = 0.0
    ) -> None:
        if not lower < upper:
            raise errors.AbsValueError(f"Lower bound {lower} must be strictly smaller than upper bound {upper}")
        self.name = name
        self.function = function
        self.lower = float(lower)
        self.upper = float(upper)
        self.optimum = float(optimum)

    @classmethod
    def from_registry(cls, name: str) -> "BenchmarkFunction":
        """Creates one of the analytic functions of corefuncs, with its default bounds"""
        info = corefuncs.registry.get_info(name)
        return cls(name, corefuncs.registry[name], info["lower"], info["upper"], info.get("optimum", 0.0))

    def __call__(self, x: tp.ArrayLike) -> float:
        return self.function(np.asarray(x, dtype=float))

    def error(self, loss: float) -> float:
        """Distance between a loss and the optimal value"""
        return float(loss - self.optimum)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name}, bounds=[{self.lower}, {self.upper}])"


class CECFunction(BenchmarkFunction):
    """Function of the CEC2013 or CEC2017 suite, computed by an external evaluator

    Parameters
    ----------
    suite: str
        "cec2013" or "cec2017"
    number: int
        number of the function in the suite
    dimension: int
        dimension of the search space (CEC suites only support some of them)
    evaluator: callable or None
        callable with signature evaluator(x, number) -> float. If not provided, the
        evaluator registered in cec_evaluators under the suite name is used.
    """

    _TABLES = {
        "cec2013": (cec2013_bounds, cec2013_optimum),
        "cec2017": (cec2017_bounds, cec2017_optimum),
    }

    def __init__(self, suite: str, number: int, dimension: int, evaluator: tp.Optional[CECEvaluator] = None) -> None:
        if suite not in self._TABLES:
            raise errors.AbsValueError(f"Unknown CEC suite {suite!r} (available: {sorted(self._TABLES)})")
        if evaluator is None:
            if suite not in cec_evaluators:
                raise errors.UnsupportedExperiment(
                    f"No evaluator registered for {suite}, "
                    f"use abswarm.functions.benchmarks.cec_evaluators.register_name({suite!r}, evaluator)"
                )
            evaluator = cec_evaluators[suite]
        bounds, optimum = self._TABLES[suite]
        lower, upper = bounds(number)
        self.suite = suite
        self.number = number
        self.dimension = dimension
        self._evaluator = evaluator
        super().__init__(f"{suite}_f{number}", self._evaluate, lower, upper, optimum(number))

    def _evaluate(self, x: np.ndarray) -> float:
        if x.shape != (self.dimension,):
            raise errors.AbsValueError(f"Expected a point of shape ({self.dimension},) but got {x.shape}")
        return float(self._evaluator(x, self.number))

# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import warnings
from numbers import Real
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import tools as abstools
from abswarm.common import errors as errors
from abswarm.common.decorators import Registry


registry: Registry["ConfiguredOptimizer"] = Registry()
_OptimCallBack = tp.Callable[["Optimizer", np.ndarray, float], None]


class Recommendation(tp.NamedTuple):
    """Best point found by an optimizer"""

    x: np.ndarray
    loss: float
    num_evaluations: int


class Optimizer:  # pylint: disable=too-many-instance-attributes
    """Algorithm framework for optimizers driving the objective function themselves
    until the budget is exhausted.

    Subclasses implement :code:`_internal_minimize`, and must call the objective function
    through :code:`_evaluate` only: it counts the evaluations, keeps track of the best point
    and calls the registered callbacks.

    Each optimizer instance should be used only once, with the initial provided budget

    Parameters
    ----------
    dimension: int
        dimension of the optimization space
    budget: int
        number of allowed evaluations
    lower: float
        lower bound of every coordinate of the search space
    upper: float
        upper bound of every coordinate of the search space
    random_state: int or np.random.RandomState or None
        seed or random state the optimizer pulls from. If None, it is seeded from
        system entropy at first use.
    """

    def __init__(
        self,
        dimension: int,
        budget: int,
        lower: float = -5.0,
        upper: float = 5.0,
        random_state: tp.RandomStateLike = None,
    ) -> None:
        for name, value in [("Dimension", dimension), ("Budget", budget)]:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise errors.AbsValueError(f"{name} must be a strictly positive integer (got {value!r})")
        self._dimension = int(dimension)
        self.budget = int(budget)
        self._lower, self._upper = self._check_bounds(lower, upper)
        self._random_state: tp.Optional[np.random.RandomState] = None
        if random_state is not None:
            if not isinstance(random_state, np.random.RandomState):
                if (
                    isinstance(random_state, bool)
                    or not isinstance(random_state, (int, np.integer))
                    or not 0 <= random_state < 2**32
                ):
                    raise errors.AbsValueError(
                        f"random_state must be a seed in [0, 2**32) or a np.random.RandomState (got {random_state!r})"
                    )
                random_state = np.random.RandomState(random_state)
            self.random_state = random_state
        self.name = self.__class__.__name__  # printed name in repr
        # instance state
        self._objective_function: tp.Optional[tp.Objective] = None
        self._num_evaluations = 0
        self._best_x: tp.Optional[np.ndarray] = None
        self._best_loss = float("inf")
        self._started = False
        self._callbacks: tp.Dict[str, tp.List[_OptimCallBack]] = {}

    @staticmethod
    def _check_bounds(lower: float, upper: float) -> tp.Tuple[float, float]:
        if not isinstance(lower, Real) or not isinstance(upper, Real):
            raise errors.AbsValueError(f"Bounds must be real numbers (got {lower!r}, {upper!r})")
        if not (np.isfinite(lower) and np.isfinite(upper)):
            raise errors.AbsValueError(f"Bounds must be finite (got [{lower}, {upper}])")
        if not lower < upper:
            raise errors.AbsValueError(f"Lower bound {lower} must be strictly smaller than upper bound {upper}")
        return float(lower), float(upper)

    @property
    def random_state(self) -> np.random.RandomState:
        """np.random.RandomState: random state the optimizer pulls from.
        It can be seeded (:code:`optimizer.random_state.seed(12)`) or replaced.
        """
        if self._random_state is None:
            seed = np.random.randint(2 ** 32, dtype=np.uint32)
            self._random_state = np.random.RandomState(seed)
        return self._random_state

    @random_state.setter
    def random_state(self, random_state: np.random.RandomState) -> None:
        if not isinstance(random_state, np.random.RandomState):
            raise errors.AbsTypeError(f"Expected a np.random.RandomState but got {random_state!r}")
        self._random_state = random_state

    @property
    def _rng(self) -> np.random.RandomState:
        return self.random_state

    @property
    def dimension(self) -> int:
        """int: Dimension of the optimization space."""
        return self._dimension

    @property
    def lower(self) -> float:
        return self._lower

    @property
    def upper(self) -> float:
        return self._upper

    def set_bounds(self, lower: float, upper: float) -> "Optimizer":
        """Overrides the search bounds. This is only possible before the optimization starts."""
        if self._started:
            raise errors.AbsRuntimeError("Bounds cannot be changed once the optimization has started")
        self._lower, self._upper = self._check_bounds(lower, upper)
        return self

    @property
    def num_evaluations(self) -> int:
        """int: Number of calls to the objective function so far (FEs)."""
        return self._num_evaluations

    @property
    def remaining_budget(self) -> int:
        return self.budget - self._num_evaluations

    @property
    def progress(self) -> float:
        """float: Fraction of the budget consumed so far, in [0, 1]."""
        return self._num_evaluations / self.budget

    def __repr__(self) -> str:
        return (
            f"Instance of {self.name}(dimension={self.dimension}, budget={self.budget}, "
            f"bounds=[{self.lower}, {self.upper}])"
        )

    def register_callback(self, name: str, callback: _OptimCallBack) -> None:
        """Add a callback method called after each evaluation of the objective function,
        with the optimizer, the evaluated point and its loss as arguments.
        This can be useful for custom logging.

        Parameters
        ----------
        name: str
            name of the method to register the callback for (only :code:`tell` is available)
        callback: callable
            a callable taking the optimizer, the point and its loss
        """
        if name != "tell":
            raise errors.AbsValueError(f'Only the "tell" method can have callbacks (not {name})')
        self._callbacks.setdefault(name, []).append(callback)

    def remove_all_callbacks(self) -> None:
        """Removes all registered callables"""
        self._callbacks = {}

    def _evaluate(self, x: np.ndarray) -> float:
        """Evaluates the objective function on a point, counting one evaluation.
        Non-finite losses are replaced by +inf (with a warning) so that they
        never become a best point. Errors of the objective function are not caught.
        """
        if self._objective_function is None:
            raise errors.AbsRuntimeError("No objective function to evaluate, use minimize")
        if self._num_evaluations >= self.budget:
            raise errors.BudgetExhaustedError(f"Budget of {self.budget} evaluations is exhausted")
        self._num_evaluations += 1
        loss = self._objective_function(x.copy())
        if isinstance(loss, np.ndarray) and loss.size == 1:
            loss = loss.item()
        if isinstance(loss, bool) or not isinstance(loss, (Real, np.floating, np.integer)):
            raise errors.AbsTypeError(
                f"The objective function must return a float but returned: {loss} (type: {type(loss)})."
            )
        loss = float(loss)
        if not np.isfinite(loss):
            warnings.warn(f"Replacing loss {loss} by inf at evaluation {self._num_evaluations}", errors.BadLossWarning)
            loss = float("inf")
        if loss < self._best_loss:
            self._best_loss = loss
            self._best_x = np.array(x, copy=True)
        for callback in self._callbacks.get("tell", []):
            callback(self, x, loss)
        return loss

    def recommend(self) -> Recommendation:
        """Provides the best point evaluated so far"""
        if self._best_x is None:
            if not self._num_evaluations:
                raise errors.AbsRuntimeError("No recommendation available before the first evaluation")
            # only non-finite losses were observed
            return Recommendation(np.full(self.dimension, np.nan), self._best_loss, self._num_evaluations)
        return Recommendation(self._best_x.copy(), self._best_loss, self._num_evaluations)

    def minimize(self, objective_function: tp.Objective) -> Recommendation:
        """Optimization (minimization) procedure, running until the budget is exhausted

        Parameters
        ----------
        objective_function: callable
            A callable to optimize (minimize), taking a 1d array of size dimension and
            returning a float

        Returns
        -------
        Recommendation
            the best point, its loss and the number of evaluations
        """
        if self._started:
            raise errors.AbsRuntimeError(f"{self.name} instances can only be used once")
        self._started = True
        self._objective_function = objective_function
        self._internal_minimize()
        return self.recommend()

    def _internal_minimize(self) -> None:
        raise NotImplementedError("Optimizer undefined.")


class ConfiguredOptimizer:
    """Creates optimizer-like instances with configuration.

    Parameters
    ----------
    OptimizerClass: type
        class of the optimizer to configure
    config: dict
        dictionnary of all the configurations

    Note
    ----
    This provides a default repr which can be bypassed through set_name
    """

    def __init__(self, OptimizerClass: tp.Type[Optimizer], config: tp.Dict[str, tp.Any]) -> None:
        self._OptimizerClass = OptimizerClass
        config.pop("self", None)  # self comes from "locals()"
        config.pop("__class__", None)  # self comes from "locals()"
        self._config = config  # keep all, to avoid weird behavior at mismatch between optim and configoptim
        diff = abstools.different_from_defaults(instance=self, instance_dict=config, check_mismatches=True)
        params = ", ".join(f"{x}={y!r}" for x, y in sorted(diff.items()))
        self.name = f"{self.__class__.__name__}({params})"

    def config(self) -> tp.Dict[str, tp.Any]:
        return dict(self._config)

    def __call__(
        self,
        dimension: int,
        budget: int,
        lower: float = -5.0,
        upper: float = 5.0,
        random_state: tp.RandomStateLike = None,
    ) -> Optimizer:
        """Creates an optimizer

        Parameters
        ----------
        dimension: int
            dimension of the optimization space
        budget: int
            number of allowed evaluations
        lower: float
            lower bound of each coordinate
        upper: float
            upper bound of each coordinate
        random_state: int or np.random.RandomState or None
            seed or random state of the run
        """
        run = self._OptimizerClass(  # type: ignore
            dimension, budget, lower=lower, upper=upper, random_state=random_state, config=self
        )
        run.name = self.name
        return run

    def __repr__(self) -> str:
        return self.name

    def set_name(self, name: str, register: bool = False) -> "ConfiguredOptimizer":
        """Set a new representation for the instance"""
        self.name = name
        if register:
            registry.register_name(name, self)
        return self

    def __eq__(self, other: tp.Any) -> tp.Any:
        if self.__class__ == other.__class__:
            if self._config == other._config:
                return True
        return False

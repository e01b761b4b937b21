# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import time
import logging
import warnings
import traceback
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import decorators
from abswarm.common import errors
from abswarm.functions import BenchmarkFunction
from ..optimization import base as obase
from ..optimization.optimizerlib import registry as optimizer_registry  # import from optimizerlib so as to fill it


logger = logging.getLogger(__name__)
registry: decorators.Registry[tp.Callable[..., tp.Iterator["Experiment"]]] = decorators.Registry()


def create_seed_generator(seed: tp.Optional[int]) -> tp.Iterator[tp.Optional[int]]:
    """Create a stream of seeds, independent from the standard random stream.
    This is designed to be used in experiment plans generators, for reproducibility.

    Parameter
    ---------
    seed: int or None
        the initial seed

    Yields
    ------
    int or None
        potential new seeds, or None if the initial seed was None
    """
    generator = None if seed is None else np.random.RandomState(seed=seed)
    while True:
        yield None if generator is None else int(generator.randint(2**31))


class Experiment:
    """Specifies an experiment which can be run in benchmarks.

    Parameters
    ----------
    function: BenchmarkFunction
        the function to minimize, along with its bounds and optimal value
    optimizer: str or ConfiguredOptimizer
        the optimizer configuration, or its name in the optimizer registry
    dimension: int
        dimension of the search space
    budget: int
        number of allowed evaluations
    seed: int or None
        seed of the random state of the optimizer

    Note
    ----
    - "run" method catches errors but forwards the traceback to stderr so that errors are not
      completely hidden
    - "run" method outputs the description of the experiment, which is a set of figures/names
      from the settings (dimension, budget, etc...) and the results (loss, error, etc...)
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        function: BenchmarkFunction,
        optimizer: tp.Union[str, obase.ConfiguredOptimizer],
        dimension: int,
        budget: int,
        seed: tp.Optional[int] = None,
    ) -> None:
        if not isinstance(function, BenchmarkFunction):
            raise errors.AbsTypeError(f"Experiments require a BenchmarkFunction (got {function!r})")
        if isinstance(optimizer, str):
            if optimizer not in optimizer_registry:
                raise errors.AbsValueError(
                    f'Unknown optimizer "{optimizer}" (available: {sorted(optimizer_registry)})'
                )
            optimizer = optimizer_registry[optimizer]
        self.function = function
        self.optimizer = optimizer
        self.dimension = dimension
        self.budget = budget
        self.seed = seed
        self.result: tp.Dict[str, tp.Any] = {
            "loss": np.nan,
            "error": np.nan,
            "elapsed_time": np.nan,
            "num_evaluations": 0,
            "failure": "",
        }
        self.recommendation: tp.Optional[obase.Recommendation] = None

    def __repr__(self) -> str:
        return (
            f"Experiment: {self.optimizer} (dim={self.dimension}, budget={self.budget}) "
            f"on {self.function} with seed {self.seed}"
        )

    def run(self) -> tp.Dict[str, tp.Any]:
        """Run an experiment with the provided settings

        Returns
        -------
        dict
            A dict containing all the information about the experiment (settings + results)

        Note
        ----
        This function catches errors (but forwards stderr). It fills up the "failure" field
        ("" if no error, else the error name).
        """
        try:
            self._run_with_error()
        except errors.UnsupportedExperiment as ex:
            raise ex
        except Exception as e:  # pylint: disable=broad-except
            self.result["failure"] = e.__class__.__name__
            print(f"Error when applying {self}:", file=sys.stderr)
            traceback.print_exc()
            print("\n", file=sys.stderr)
        return self.get_description()

    def _run_with_error(self) -> None:
        optimizer = self.optimizer(
            self.dimension,
            self.budget,
            lower=self.function.lower,
            upper=self.function.upper,
            random_state=self.seed,
        )
        t0 = time.time()
        with warnings.catch_warnings():
            # benchmarks do not need to be efficient
            warnings.filterwarnings("ignore", category=errors.InefficientSettingsWarning)
            try:
                recom = optimizer.minimize(self.function)
            finally:
                self.result["elapsed_time"] = time.time() - t0
                self.result["num_evaluations"] = optimizer.num_evaluations
        self.recommendation = recom
        self.result["loss"] = recom.loss
        self.result["error"] = self.function.error(recom.loss)
        logger.debug("%s: loss %s after %s evaluations", self, recom.loss, recom.num_evaluations)

    def get_description(self) -> tp.Dict[str, tp.Any]:
        """Return the description of the experiment, as a dict.
        "run" must be called beforehand in order to have non-nan values for the loss.
        """
        return dict(
            self.result,
            function=self.function.name,
            optimizer=self.optimizer.name,
            dimension=self.dimension,
            budget=self.budget,
            seed=-1 if self.seed is None else self.seed,
        )

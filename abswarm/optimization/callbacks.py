# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import time
import logging
import numpy as np
import pandas as pd
import abswarm.common.typing as tp
from . import base

global_logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------------


class OptimizationLogger:
    """Logger to register as callback in an optimizer, for logging
    best point regularly.

    Parameters
    ----------
    logger:
        given logger that callback will use to log
    log_level:
        log level that logger will write to
    log_interval_tells: int
        max number of evaluation before performing another log
    log_interval_seconds:
        max number of seconds before performing another log
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_tells: int = 1,
        log_interval_seconds: float = 60.0,
    ) -> None:
        assert log_interval_tells > 0
        assert log_interval_seconds > 0
        self._logger = logger
        self._log_level = log_level
        self._log_interval_tells = int(log_interval_tells)
        self._log_interval_seconds = log_interval_seconds
        self._next_tell = self._log_interval_tells
        self._next_time = time.time() + log_interval_seconds

    # pylint: disable=unused-argument
    def __call__(self, optimizer: base.Optimizer, x: np.ndarray, loss: float) -> None:
        if time.time() >= self._next_time or optimizer.num_evaluations >= self._next_tell:
            self._next_time = time.time() + self._log_interval_seconds
            self._next_tell = optimizer.num_evaluations + self._log_interval_tells
            recom = optimizer.recommend()
            self._logger.log(
                self._log_level,
                "After %s evaluations, best loss is %s at %s",
                optimizer.num_evaluations,
                recom.loss,
                recom.x,
            )


# -------------------------------------------------------------------------------------


class ConvergenceTrace:
    """Records the best loss along the evaluations, for convergence analysis.

    Parameters
    ----------
    improvements_only: bool
        only record the evaluations which improved the best loss

    Example
    -------

    .. code-block:: python

        trace = ConvergenceTrace()
        optimizer.register_callback("tell", trace)
        optimizer.minimize(func)
        df = trace.to_dataframe()
    """

    def __init__(self, improvements_only: bool = False) -> None:
        self.improvements_only = improvements_only
        self.num_evaluations: tp.List[int] = []
        self.best_losses: tp.List[float] = []

    # pylint: disable=unused-argument
    def __call__(self, optimizer: base.Optimizer, x: np.ndarray, loss: float) -> None:
        best = optimizer.recommend().loss
        if self.improvements_only and self.best_losses and not best < self.best_losses[-1]:
            return
        self.num_evaluations.append(optimizer.num_evaluations)
        self.best_losses.append(best)

    def __len__(self) -> int:
        return len(self.best_losses)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({"num_evaluations": self.num_evaluations, "best_loss": self.best_losses})


# -------------------------------------------------------------------------------------


class ProgressBar:
    """Progress bar to register as callback in an optimizer"""

    def __init__(self) -> None:
        self._progress_bar: tp.Any = None
        self._current = 0

    # pylint: disable=unused-argument
    def __call__(self, optimizer: base.Optimizer, x: np.ndarray, loss: float) -> None:
        if self._progress_bar is None:
            # pylint: disable=import-outside-toplevel
            try:
                from tqdm import tqdm  # Inline import to avoid additional dependency
            except ImportError as e:
                raise ImportError(
                    f"{self.__class__.__name__} requires tqdm which is not installed by default "
                    "(pip install tqdm)"
                ) from e
            self._progress_bar = tqdm()
            self._progress_bar.total = optimizer.budget
            self._progress_bar.update(self._current)
        self._progress_bar.update(1)
        self._current += 1
        if self._current >= optimizer.budget:
            self._progress_bar.close()

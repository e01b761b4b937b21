# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import pytest
import numpy as np
import abswarm.common.typing as tp
from abswarm.functions import corefuncs
from . import callbacks
from . import optimizerlib
from .test_base import RandomSearch


def test_optimization_logger(caplog: tp.Any) -> None:
    caplog.set_level(logging.INFO)
    logger = logging.getLogger(__name__)
    optimizer = RandomSearch(2, 25, random_state=12)
    optimizer.register_callback(
        "tell", callbacks.OptimizationLogger(logger=logger, log_interval_tells=10, log_interval_seconds=3600)
    )
    optimizer.minimize(corefuncs.sphere)
    messages = [r.getMessage() for r in caplog.records if r.name == __name__]
    assert len(messages) == 2
    assert messages[0].startswith("After 10 evaluations, best loss is")
    assert messages[1].startswith("After 20 evaluations, best loss is")


def test_optimization_logger_log_level(caplog: tp.Any) -> None:
    caplog.set_level(logging.INFO)
    logger = logging.getLogger(__name__)
    optimizer = RandomSearch(2, 5, random_state=12)
    optimizer.register_callback("tell", callbacks.OptimizationLogger(logger=logger, log_level=logging.DEBUG))
    optimizer.minimize(corefuncs.sphere)
    assert not [r for r in caplog.records if r.name == __name__]


def test_convergence_trace() -> None:
    trace = callbacks.ConvergenceTrace()
    optimizer = optimizerlib.ConfCHxPSO(popsize=5)(3, 60, random_state=12)
    optimizer.register_callback("tell", trace)
    recom = optimizer.minimize(corefuncs.sphere)
    assert len(trace) == 60
    df = trace.to_dataframe()
    assert list(df.columns) == ["num_evaluations", "best_loss"]
    np.testing.assert_array_equal(df.num_evaluations, np.arange(1, 61))
    assert df.best_loss.iloc[-1] == recom.loss
    assert np.all(np.diff(df.best_loss.values) <= 0)


def test_convergence_trace_improvements_only() -> None:
    trace = callbacks.ConvergenceTrace(improvements_only=True)
    optimizer = optimizerlib.CHCLPSO_ABS(3, 100, random_state=12)
    optimizer.register_callback("tell", trace)
    recom = optimizer.minimize(corefuncs.rastrigin)
    assert 1 <= len(trace) <= 100
    assert trace.num_evaluations[0] == 1
    assert trace.best_losses[-1] == recom.loss
    assert np.all(np.diff(trace.best_losses) < 0)


def test_progress_bar() -> None:
    pytest.importorskip("tqdm")
    bar = callbacks.ProgressBar()
    optimizer = RandomSearch(2, 12, random_state=12)
    optimizer.register_callback("tell", bar)
    optimizer.minimize(corefuncs.sphere)
    assert bar._current == 12

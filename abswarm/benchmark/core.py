# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
from pathlib import Path
import pandas as pd
import abswarm.common.typing as tp
from abswarm.common import errors
from .experiments import registry as registry
from .experiments import Experiment as Experiment


logger = logging.getLogger(__name__)
SUMMARY_COLUMNS = ["mean", "std", "best", "worst", "error"]


def save_or_append_to_csv(df: pd.DataFrame, path: tp.PathLike) -> None:
    """Saves a dataframe to a file in append mode"""
    path = Path(path)
    if path.exists():
        logger.info("Appending to existing file %s", path)
        predf = pd.read_csv(str(path))
        df = pd.concat([predf, df], sort=False)
    df.to_csv(path, index=False)


def compute(
    experiment_name: str,
    repetitions: int = 1,
    seed: tp.Optional[int] = None,
    **settings: tp.Any,
) -> pd.DataFrame:
    """Runs all the experiments of an experiment plan

    Parameters
    ----------
    experiment_name: str
        name of the experiment plan (must be registered in experiments.registry)
    repetitions: int
        number of times the plan is run (the seed is incremented at each repetition)
    seed: int
        a seed for the experiment plan
    **settings:
        additional keyword arguments of the experiment plan (dimension, popsize, budget_factor...)

    Returns
    -------
    pd.DataFrame
        The dataframe summarizing all the experiments (each experiment is a line)
    """
    if experiment_name not in registry:
        raise errors.AbsValueError(f'Unknown experiment "{experiment_name}" (available: {sorted(registry)})')
    if repetitions < 1:
        raise errors.AbsValueError(f"repetitions must be at least 1 (got {repetitions})")
    descriptions: tp.List[tp.Dict[str, tp.Any]] = []
    for k in range(repetitions):
        for xp in registry[experiment_name](seed=None if seed is None else seed + k, **settings):
            description = xp.run()
            description["repetition"] = k
            logger.info(
                "Repetition %s/%s, %s on %s: loss %s",
                k + 1,
                repetitions,
                description["optimizer"],
                description["function"],
                description["loss"],
            )
            descriptions.append(description)
    return pd.DataFrame(descriptions)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Statistics of the final losses of each (function, optimizer) pair

    Returns
    -------
    pd.DataFrame
        indexed by function and optimizer, with columns mean, std (population standard
        deviation), best, worst, and error (mean distance to the optimal value)
    """
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    grouped = df.groupby(["function", "optimizer"], sort=False)
    return grouped.agg(
        mean=("loss", "mean"),
        std=("loss", lambda x: x.std(ddof=0)),
        best=("loss", "min"),
        worst=("loss", "max"),
        error=("error", "mean"),
    )

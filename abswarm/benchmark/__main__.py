# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import os
import logging
import argparse
from pathlib import Path
import pandas as pd
import abswarm.common.typing as tp
from . import core
from .experiments import DEFAULT_OPTIMIZERS


# pylint: disable=too-many-arguments
def launch(
    experiment: str,
    seed: tp.Optional[int] = None,
    repetitions: int = 1,
    output: tp.Optional[tp.PathLike] = None,
    **settings: tp.Any,
) -> pd.DataFrame:
    """Runs an experiment plan, saves the results to a csv file and returns their summary"""
    csvpath = Path(experiment + ".csv") if output is None else Path(output)
    df = core.compute(experiment, repetitions=repetitions, seed=seed, **settings)
    core.save_or_append_to_csv(df, csvpath)
    print(f"Saved data to {csvpath}")
    return core.summarize(df)


def get_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an experiment and create a result csv file.")
    parser.add_argument(
        "experiment", type=str, help="name of an experiment registered in the experiments registry"
    )
    parser.add_argument("--dimension", type=int, default=10, help="Dimension of the search space")
    parser.add_argument(
        "--popsize", type=int, default=None, help="Number of layers (default: as registered for the optimizer)"
    )
    parser.add_argument(
        "--budget-factor",
        type=int,
        default=10000,
        help="Number of evaluations per dimension (budget = budget_factor * dimension)",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Total threshold of the admission control (default: as registered for the optimizer)",
    )
    parser.add_argument(
        "--repetitions",
        type=int,
        default=1,
        help="Number of repetitions to perform for the experiment plan (seeds will be incremented)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Use a seed for reproducibility",
    )
    parser.add_argument(
        "--optimizer",
        type=str,
        nargs="+",
        default=list(DEFAULT_OPTIMIZERS),
        help="Name(s) of the registered optimizer(s) to benchmark",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path for the CSV file (default: <experiment>.csv). Existing files are appended",
    )
    return parser.parse_args()


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))
    args = get_args()
    summary = launch(
        args.experiment,
        seed=args.seed,
        repetitions=args.repetitions,
        output=args.output,
        dimension=args.dimension,
        popsize=args.popsize,
        budget_factor=args.budget_factor,
        threshold=args.threshold,
        optimizers=args.optimizer,
    )
    print(summary.to_string())

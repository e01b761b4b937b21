# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Definitions of some convenient types.
"""
# pylint: disable=unused-import
# structures
from typing import Any as Any
from typing import Type as Type
from typing import TypeVar as TypeVar
from typing import Optional as Optional
from typing import Union as Union

# containers
from typing import Dict as Dict
from typing import Tuple as Tuple
from typing import List as List
from typing import Sequence as Sequence
from typing import NamedTuple as NamedTuple
from typing import MutableMapping as MutableMapping

# iterables
from typing import Iterator as Iterator
from typing import Iterable as Iterable

# others
from typing import Callable as Callable
from pathlib import Path as Path
from typing_extensions import Protocol

#
import numpy as _np


ArrayLike = Union[Tuple[float, ...], List[float], _np.ndarray]
PathLike = Union[str, Path]
Objective = Callable[[_np.ndarray], float]
Schedule = Tuple[float, float]
RandomStateLike = Union[None, int, _np.random.RandomState]


# %% Protocol definitions


class ExemplarStrategy(Protocol):
    """Callable rebuilding the exemplar of one layer in place.

    Parameters
    ----------
    layers: list of Layer
        the whole population (donors may be read from any layer)
    index: int
        index of the layer whose exemplar must be rebuilt
    rng: np.random.RandomState
        random state of the optimizer
    progress: float
        fraction of the budget consumed so far, in [0, 1]
    """

    # pylint: disable=pointless-statement, unused-argument

    def __call__(self, layers: Sequence[Any], index: int, rng: _np.random.RandomState, progress: float) -> None:
        ...

# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.common import tools
from .layers import Layer


class CognitiveExemplar:
    """Cognitive-only exemplar (CHpPSO-ABS): the exemplar of a layer is a copy of its own best point"""

    # pylint: disable=unused-argument
    def __call__(self, layers: tp.Sequence[Layer], index: int, rng: np.random.RandomState, progress: float) -> None:
        layer = layers[index]
        layer.exemplar = layer.best.copy()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class ComprehensiveLearningExemplar:
    """Comprehensive learning exemplar (CHCLPSO-ABS): each coordinate of the exemplar
    is borrowed from the best point of a random layer with probability Pc, and from the
    layer's own best point otherwise.

    Parameters
    ----------
    pc_init: float
        learning probability at the start of the run
    pc_final: float
        learning probability at the end of the run (Pc increases linearly in between)
    probability: float or None
        if provided, a fixed learning probability used instead of the schedule

    Note
    ----
    The donor layer of each coordinate is recorded in `learning_sources` (layer index -> array
    of donor indices). This is diagnostic information only, it is never read by the optimizer.
    """

    def __init__(self, pc_init: float = 0.05, pc_final: float = 0.5, probability: tp.Optional[float] = None) -> None:
        for name, value in [("pc_init", pc_init), ("pc_final", pc_final), ("probability", probability)]:
            if value is not None and not 0 <= value <= 1:
                raise errors.AbsValueError(f"{name} must be in [0, 1] (got {value})")
        self.pc_init = pc_init
        self.pc_final = pc_final
        self.probability = probability
        self.learning_sources: tp.Dict[int, np.ndarray] = {}

    def pc(self, progress: float) -> float:
        """Learning probability after the given fraction of the budget"""
        if self.probability is not None:
            return self.probability
        return tools.linear_interpolation(self.pc_init, self.pc_final, progress)

    def __call__(self, layers: tp.Sequence[Layer], index: int, rng: np.random.RandomState, progress: float) -> None:
        layer = layers[index]
        num_layers = len(layers)
        pc = self.pc(progress)
        exemplar = np.empty(layer.dimension)
        sources = np.empty(layer.dimension, dtype=int)
        for d in range(layer.dimension):
            if rng.uniform() < pc:
                donor = min(int(rng.uniform() * num_layers), num_layers - 1)
            else:
                donor = index
            exemplar[d] = layers[donor].best[d]
            sources[d] = donor
        layer.exemplar = exemplar
        self.learning_sources[index] = sources

    def __repr__(self) -> str:
        if self.probability is not None:
            return f"{self.__class__.__name__}(probability={self.probability})"
        return f"{self.__class__.__name__}(pc_init={self.pc_init}, pc_final={self.pc_final})"


def get_strategy(name: str, learning_probability: tp.Schedule = (0.05, 0.5)) -> tp.ExemplarStrategy:
    """Creates an exemplar strategy from its name ("cognitive" or "comprehensive")"""
    if name == "cognitive":
        return CognitiveExemplar()
    if name == "comprehensive":
        return ComprehensiveLearningExemplar(*learning_probability)
    raise errors.AbsValueError(f'Unknown exemplar strategy "{name}" (available: "cognitive", "comprehensive")')

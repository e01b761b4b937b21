# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import enum
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors


class Role(enum.Enum):
    """Specialization of a particle inside its layer"""

    EXPLORATION = "Er"
    EXPLOITATION = "Ei"


class Particle:
    """Position and velocity of one search channel of a layer.

    Parameters
    ----------
    x: np.ndarray
        position
    v: np.ndarray
        velocity, same shape as the position
    role: Role
        exploration (Er) or exploitation (Ei)

    Note
    ----
    alpha counts the consecutive evaluations of this particle which did not improve
    the best point of its layer.
    """

    def __init__(self, x: np.ndarray, v: np.ndarray, role: Role) -> None:
        self.x = np.array(x, dtype=float, copy=True)
        self.v = np.array(v, dtype=float, copy=True)
        if self.x.shape != self.v.shape:
            raise errors.AbsValueError(f"Position shape {self.x.shape} and velocity shape {self.v.shape} differ")
        self.role = role
        self.alpha = 0

    def __repr__(self) -> str:
        return f"Particle({self.role.value}, alpha={self.alpha}, x={self.x})"


class Layer:
    """One slot of the population: a pair of exploration/exploitation particles
    sharing a best point and an exemplar.

    Parameters
    ----------
    er: Particle
        exploration particle, attracted by the exemplar
    ei: Particle
        exploitation particle, attracted by the middle of the exemplar and the global best
    best: np.ndarray
        best point found by the layer (L)
    best_loss: float
        loss of the best point
    """

    def __init__(self, er: Particle, ei: Particle, best: np.ndarray, best_loss: float) -> None:
        assert er.role == Role.EXPLORATION and ei.role == Role.EXPLOITATION
        self.er = er
        self.ei = ei
        self.best = np.array(best, dtype=float, copy=True)
        self.best_loss = float(best_loss)
        # the exemplar is only rewritten by exemplar strategies
        self.exemplar = self.best.copy()
        self.beta = 0

    @classmethod
    def seed(cls, x: np.ndarray, v: np.ndarray, loss: float) -> "Layer":
        """Creates a layer whose two particles start from the same position and velocity"""
        return cls(Particle(x, v, Role.EXPLORATION), Particle(x, v, Role.EXPLOITATION), x, loss)

    @property
    def dimension(self) -> int:
        return self.best.size

    @property
    def particles(self) -> tp.Tuple[Particle, Particle]:
        return self.er, self.ei

    def reset_counters(self) -> None:
        self.er.alpha = 0
        self.ei.alpha = 0
        self.beta = 0

    def counters(self) -> tp.Dict[str, int]:
        return {"alpha_er": self.er.alpha, "alpha_ei": self.ei.alpha, "beta": self.beta}

    def __repr__(self) -> str:
        counters = ", ".join(f"{x}={y}" for x, y in self.counters().items())
        return f"Layer(best_loss={self.best_loss}, {counters})"

# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from abswarm.common import tools
from .layers import Particle


class LinearSchedule:
    """Coefficient varying linearly from an initial to a final value
    along the consumed fraction of the budget.

    Parameters
    ----------
    start: float
        value when no budget is consumed
    end: float
        value when the whole budget is consumed
    """

    def __init__(self, start: float, end: float) -> None:
        self.start = float(start)
        self.end = float(end)

    @classmethod
    def from_pair(cls, pair: tp.Schedule, name: str = "schedule") -> "LinearSchedule":
        try:
            start, end = pair
        except (TypeError, ValueError) as e:
            raise errors.AbsValueError(f"{name} must be a pair (initial, final), got {pair!r}") from e
        return cls(start, end)

    def __call__(self, progress: float) -> float:
        return tools.linear_interpolation(self.start, self.end, progress)

    def __repr__(self) -> str:
        return f"LinearSchedule({self.start} -> {self.end})"


def clip_velocity(particle: Particle, v_max: float) -> None:
    np.clip(particle.v, -v_max, v_max, out=particle.v)


def apply_bounds(particle: Particle, lower: float, upper: float) -> np.ndarray:
    """Clamps the coordinates which left [lower, upper] to the boundary, and
    zeroes the corresponding velocity components (inelastic boundary).

    Returns
    -------
    np.ndarray
        boolean mask of the clamped coordinates
    """
    outside = (particle.x < lower) | (particle.x > upper)
    if np.any(outside):
        np.clip(particle.x, lower, upper, out=particle.x)
        particle.v[outside] = 0.0
    return outside

# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Adaptive Bi-Strategy (ABS): admission control deciding, for each layer,
whether its exploration or exploitation particle is evaluated, or whether its
exemplar must be rebuilt first.

The slack allowed to each channel is given by two thresholds computed from the
consumed budget: the exploration threshold M_Er decreases from M to 0 while the
exploitation threshold M_Ei increases from 0 to M, shifting the evaluations
from exploration to exploitation along the run.
"""

import enum
import math
from numbers import Real
import abswarm.common.typing as tp
from abswarm.common import errors
from .layers import Layer


class Action(enum.Enum):
    RECONSTRUCT = "reconstruct"
    EXPLORE = "explore"  # evaluate the Er particle
    EXPLOIT = "exploit"  # evaluate the Ei particle


def thresholds(num_evaluations: int, budget: int, total: int) -> tp.Tuple[int, int]:
    """Computes the stall thresholds of both channels

    Parameters
    ----------
    num_evaluations: int
        number of evaluations consumed so far (FEs)
    budget: int
        maximum number of evaluations
    total: int
        total threshold M, shared between both channels

    Returns
    -------
    tuple
        (M_Er, M_Ei) = (ceil(M * (1 - FEs / budget)), floor(M * FEs / budget))
    """
    if budget <= 0:
        raise errors.AbsValueError(f"Budget must be strictly positive (got {budget})")
    if total < 0 or num_evaluations < 0:
        raise errors.AbsValueError(f"Threshold and number of evaluations must be non-negative (got {total}, {num_evaluations})")
    # integer arithmetic keeps the boundary values exact
    m_ei = (total * num_evaluations) // budget
    m_er = -((-total * (budget - num_evaluations)) // budget)
    return m_er, m_ei


def select_action(layer: Layer, m_er: int, m_ei: int) -> Action:
    """Selects what to do with a layer, given the current thresholds.
    This does not modify the layer.
    """
    alpha_er, alpha_ei, beta = layer.er.alpha, layer.ei.alpha, layer.beta
    if (beta != 0 and alpha_er > m_er) or alpha_ei > m_ei:
        return Action.RECONSTRUCT
    if alpha_er <= m_er:
        return Action.EXPLORE
    if alpha_er > m_er and beta == 0 and alpha_ei <= m_ei:
        return Action.EXPLOIT
    return Action.RECONSTRUCT


class AdaptiveBiStrategy:
    """Admission control with a fixed total threshold M

    Parameters
    ----------
    total: int
        total threshold M: M_Er + M_Ei is M (or M + 1 while M * FEs / budget is not an integer)
    """

    def __init__(self, total: int) -> None:
        valid = isinstance(total, Real) and not isinstance(total, bool) and math.isfinite(total)
        if not valid or int(total) != total or total < 0:
            raise errors.AbsValueError(f"Total threshold must be a non-negative integer (got {total})")
        self.total = int(total)

    def thresholds(self, num_evaluations: int, budget: int) -> tp.Tuple[int, int]:
        return thresholds(num_evaluations, budget, self.total)

    @staticmethod
    def select_action(layer: Layer, m_er: int, m_ei: int) -> Action:
        return select_action(layer, m_er, m_ei)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(total={self.total})"

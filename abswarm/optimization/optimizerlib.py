# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import copy
import logging
import warnings
import numpy as np
import abswarm.common.typing as tp
from abswarm.common import errors
from . import base
from . import utils
from . import exemplars
from .abs import Action
from .abs import AdaptiveBiStrategy
from .layers import Layer
from .layers import Particle
from .base import registry as registry


# run with LOGLEVEL=DEBUG for more debug information
logger = logging.getLogger(__name__)


class _CHxPSO(base.Optimizer):
    """Layered particle swarm with Adaptive Bi-Strategy admission control.
    See ConfCHxPSO for the configuration.
    """

    # pylint: disable=too-many-instance-attributes
    def __init__(
        self,
        dimension: int,
        budget: int,
        lower: float = -5.0,
        upper: float = 5.0,
        random_state: tp.RandomStateLike = None,
        config: tp.Optional["ConfCHxPSO"] = None,
    ) -> None:
        super().__init__(dimension, budget, lower=lower, upper=upper, random_state=random_state)
        self._config = ConfCHxPSO() if config is None else config
        self.popsize = self._config.popsize
        if budget < self.popsize:
            warnings.warn(
                f"Budget {budget} is smaller than the population size {self.popsize}, "
                "some layers will never be evaluated",
                errors.InefficientSettingsWarning,
            )
        self.strategy = AdaptiveBiStrategy(self._config.threshold)
        exemplar = self._config.exemplar
        self.exemplar_strategy: tp.ExemplarStrategy = (
            exemplars.get_strategy(exemplar, self._config.learning_probability)
            if isinstance(exemplar, str)
            else copy.deepcopy(exemplar)
        )
        self._omega = utils.LinearSchedule.from_pair(self._config.omega, "omega")
        self._cognitive = utils.LinearSchedule.from_pair(self._config.cognitive, "cognitive")
        self._social = utils.LinearSchedule.from_pair(self._config.social, "social")
        self.layers: tp.List[Layer] = []
        self.num_rounds = 0
        self.action_counts: tp.Dict[Action, int] = {action: 0 for action in Action}

    @property
    def v_max(self) -> float:
        """float: Maximum absolute value of each velocity component"""
        return self._config.velocity_ratio * (self.upper - self.lower)

    def _internal_minimize(self) -> None:
        self._initialize()
        while self.num_evaluations < self.budget:
            self._run_round()
        logger.info(
            "%s finished after %s evaluations (%s rounds) with best loss %s",
            self.name,
            self.num_evaluations,
            self.num_rounds,
            self._best_loss,
        )

    def _initialize(self) -> None:
        """Seeds each layer with one random point, duplicated into both of its particles"""
        v_max = self.v_max
        for _ in range(self.popsize):
            if self.num_evaluations >= self.budget:
                break
            x = self._rng.uniform(self.lower, self.upper, self.dimension)
            v = self._rng.uniform(-v_max, v_max, self.dimension)
            loss = self._evaluate(x)
            self.layers.append(Layer.seed(x, v, loss))
        for index in range(len(self.layers)):
            self._construct_exemplar(index)
        logger.debug("Initialized %s layers, best loss is %s", len(self.layers), self._best_loss)

    def _construct_exemplar(self, index: int) -> None:
        self.exemplar_strategy(self.layers, index, self._rng, self.progress)

    def _run_round(self) -> None:
        """Visits each layer once, stopping as soon as the budget is exhausted"""
        # thresholds are shared by all layers of a round
        m_er, m_ei = self.strategy.thresholds(self.num_evaluations, self.budget)
        logger.debug("Round %s: M_Er=%s, M_Ei=%s", self.num_rounds, m_er, m_ei)
        for index, layer in enumerate(self.layers):
            if self.num_evaluations >= self.budget:
                break
            action = self.strategy.select_action(layer, m_er, m_ei)
            if action == Action.RECONSTRUCT:
                self.action_counts[action] += 1
                layer.reset_counters()
                self._construct_exemplar(index)
                logger.debug("Reconstructed exemplar of layer %s", index)
                action = self.strategy.select_action(layer, m_er, m_ei)
            if action == Action.EXPLORE:
                self._explore(layer)
            elif action == Action.EXPLOIT:
                self._exploit(layer)
            else:
                continue
            self.action_counts[action] += 1
        self.num_rounds += 1

    def _move(self, particle: Particle, attractor: np.ndarray, acceleration: float) -> None:
        w = self._omega(self.progress)
        r = self._rng.uniform(0.0, 1.0, self.dimension)
        particle.v = w * particle.v + acceleration * r * (attractor - particle.x)
        utils.clip_velocity(particle, self.v_max)
        particle.x = particle.x + particle.v
        utils.apply_bounds(particle, self.lower, self.upper)

    def _explore(self, layer: Layer) -> None:
        """Moves the Er particle towards the exemplar and evaluates it"""
        particle = layer.er
        self._move(particle, layer.exemplar, self._cognitive(self.progress))
        loss = self._evaluate(particle.x)
        if loss >= layer.best_loss:
            particle.alpha += 1
        else:
            particle.alpha = 0
            layer.beta += 1
            layer.best = particle.x.copy()
            layer.best_loss = loss

    def _exploit(self, layer: Layer) -> None:
        """Moves the Ei particle towards the middle of the exemplar and the global best and evaluates it"""
        particle = layer.ei
        # no global best point exists yet if all losses were non-finite
        global_best = layer.best if self._best_x is None else self._best_x
        self._move(particle, (layer.exemplar + global_best) / 2.0, self._social(self.progress))
        previous_best = self._best_loss
        loss = self._evaluate(particle.x)
        if loss >= layer.best_loss:
            particle.alpha += 1
        else:
            layer.best = particle.x.copy()
            layer.best_loss = loss
            # the counter is kept when only the layer best improves
            if loss < previous_best:
                particle.alpha = 0


class ConfCHxPSO(base.ConfiguredOptimizer):
    """Layered particle swarm optimization with Adaptive Bi-Strategy (CHxPSO-ABS).

    Each layer holds an exploration particle (Er), attracted by the layer exemplar, and an
    exploitation particle (Ei), attracted by the middle of the exemplar and the global best.
    At each round, the admission control evaluates only one particle of each layer, or
    rebuilds the layer exemplar when both channels have stalled for too long.

    Parameters
    ----------
    popsize: int
        number of layers (N)
    threshold: int
        total threshold M of the admission control, shared between the exploration
        threshold ceil(M * (1 - FEs / budget)) and the exploitation threshold floor(M * FEs / budget)
    exemplar: str or callable
        exemplar construction: "cognitive" (copy of the layer best, CHpPSO-ABS),
        "comprehensive" (comprehensive learning, CHCLPSO-ABS), or any callable
        with signature :code:`strategy(layers, index, rng, progress) -> None`.
        Strategy instances are deep-copied for each created optimizer.
    omega: tuple of float
        inertia weight w, (initial, final)
    cognitive: tuple of float
        acceleration c of the exploration particle towards the exemplar, (initial, final)
    social: tuple of float
        acceleration c1 of the exploitation particle towards the middle of the exemplar
        and the global best, (initial, final)
    velocity_ratio: float
        maximum velocity, as a ratio of the width of the search space
    learning_probability: tuple of float
        learning probability Pc of the comprehensive learning exemplar, (initial, final)

    Note
    ----
    - All (initial, final) pairs are interpolated linearly along the consumed budget.
    - Coordinates leaving the bounds are clamped and their velocity is set to 0.
    - Non-finite losses are considered worse than any finite loss.
    """

    # pylint: disable=unused-argument,too-many-arguments
    def __init__(
        self,
        popsize: int = 20,
        threshold: int = 6,
        exemplar: tp.Union[str, tp.ExemplarStrategy] = "cognitive",
        omega: tp.Schedule = (0.99, 0.2),
        cognitive: tp.Schedule = (3.0, 1.5),
        social: tp.Schedule = (2.5, 0.5),
        velocity_ratio: float = 0.2,
        learning_probability: tp.Schedule = (0.05, 0.5),
    ) -> None:
        super().__init__(_CHxPSO, locals())
        if isinstance(popsize, bool) or not isinstance(popsize, (int, np.integer)) or popsize <= 0:
            raise errors.AbsValueError(f"popsize must be a strictly positive integer (got {popsize!r})")
        if isinstance(exemplar, str):
            exemplars.get_strategy(exemplar, learning_probability)  # checks the name
        elif not callable(exemplar):
            raise errors.AbsValueError(f"exemplar must be a name or a callable (got {exemplar!r})")
        if not velocity_ratio > 0:
            raise errors.AbsValueError(f"velocity_ratio must be strictly positive (got {velocity_ratio})")
        AdaptiveBiStrategy(threshold)  # checks the threshold
        for name, pair in [("omega", omega), ("cognitive", cognitive), ("social", social)]:
            utils.LinearSchedule.from_pair(pair, name)
        self.popsize = int(popsize)
        self.threshold = threshold
        self.exemplar = exemplar
        self.omega = omega
        self.cognitive = cognitive
        self.social = social
        self.velocity_ratio = velocity_ratio
        self.learning_probability = learning_probability


CHpPSO_ABS = ConfCHxPSO().set_name("CHpPSO_ABS", register=True)
CHCLPSO_ABS = ConfCHxPSO(exemplar="comprehensive").set_name("CHCLPSO_ABS", register=True)

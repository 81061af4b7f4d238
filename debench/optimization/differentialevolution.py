# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import math
import time
import logging
import numbers
import warnings
import numpy as np
import debench.common.typing as tp
from debench.common import errors
from debench.common.decorators import Registry
from .population import Candidate
from .population import Population
from .population import evaluate

logger = logging.getLogger(__name__)

registry: Registry["DifferentialEvolution"] = Registry("optimizer")
GenerationCallback = tp.Callable[["_DE"], None]


class Recommendation(tp.NamedTuple):
    """Outcome of a run: best fitness and position seen during the whole run"""

    fitness: float
    position: np.ndarray
    generations: int
    num_evaluations: int


def select_donors(index: int, popsize: int, random_state: np.random.RandomState) -> tp.Tuple[int, int, int]:
    """Draws three distinct slots, all different from index, by rejection sampling.
    Slots are drawn in order: r1, then r2 (different from r1), then r3.
    """
    if popsize < 4:
        raise errors.ConfigurationError(f"Donor selection requires at least 4 candidates (got {popsize})")
    r1 = index
    while r1 == index:
        r1 = random_state.randint(popsize)
    r2 = index
    while r2 in (index, r1):
        r2 = random_state.randint(popsize)
    r3 = index
    while r3 in (index, r1, r2):
        r3 = random_state.randint(popsize)
    return r1, r2, r3


def binomial_crossover(
    mutant: np.ndarray, target: np.ndarray, CR: float, random_state: np.random.RandomState
) -> np.ndarray:
    """Takes each coordinate from the mutant with probability CR, and from the target otherwise.
    One coordinate (drawn first) is always taken from the mutant, so that the trial
    differs from the target even with CR = 0.
    """
    jrand = random_state.randint(mutant.size)
    transfer = random_state.uniform(size=mutant.size) < CR
    transfer[jrand] = True
    return np.where(transfer, mutant, target)


class _DE:
    """Single run of differential evolution (DE/rand/1/bin) on a box [lower, upper]^dimension.

    The run is RUNNING until "generations" generations have been performed,
    then it is terminated.
    Each generation processes all slots in order. Donors are read from the current population,
    so that individuals replaced earlier in the generation can be used as donors (steady-state variant).
    """

    # pylint: disable=too-many-instance-attributes,too-many-arguments

    def __init__(
        self,
        config: "DifferentialEvolution",
        function: tp.Objective,
        dimension: int,
        lower: float,
        upper: float,
        generations: int,
        random_state: tp.RandomStateLike = None,
    ) -> None:
        _check_settings(dimension, lower, upper, generations)
        if not callable(function):
            raise errors.ConfigurationError(f"Objective function must be callable, got {function!r}")
        self._config = config
        self.function = function
        self.dimension = int(dimension)
        self.lower = float(lower)
        self.upper = float(upper)
        self.generations = int(generations)
        self.random_state = (
            random_state
            if isinstance(random_state, np.random.RandomState)
            else np.random.RandomState(random_state)
        )
        self.generation = 0
        self.num_evaluations = 0
        self._population: tp.Optional[Population] = None
        self._best: tp.Optional[Candidate] = None
        self._callbacks: tp.Dict[str, tp.List[GenerationCallback]] = {}

    @property
    def config(self) -> "DifferentialEvolution":
        return self._config

    @property
    def population(self) -> Population:
        if self._population is None:
            self._initialize()
        assert self._population is not None
        return self._population

    @property
    def best(self) -> Candidate:
        """Copy of the best candidate seen so far"""
        if self._best is None:
            self._initialize()
        assert self._best is not None
        return self._best

    @property
    def terminated(self) -> bool:
        return self.generation >= self.generations

    def register_callback(self, name: str, callback: GenerationCallback) -> None:
        """Add a callback method called after each generation (name="generation"), with the run
        as only argument. This can be useful for logging or recording the progress.
        """
        if name != "generation":
            raise errors.DebenchValueError(f'Unknown callback "{name}", only "generation" is available')
        self._callbacks.setdefault(name, []).append(callback)

    def _evaluate(self, position: np.ndarray) -> float:
        self.num_evaluations += 1
        return evaluate(self.function, position)

    def _initialize(self) -> None:
        self._population = Population.random(
            self._evaluate,
            dimension=self.dimension,
            size=self._config.popsize,
            lower=self.lower,
            upper=self.upper,
            random_state=self.random_state,
        )
        self._best = self._population.best().copy()
        logger.debug("Initial population of %s, best fitness is %s", self._config.name, self._best.fitness)

    def step(self) -> None:
        """Performs one generation"""
        if self.terminated:
            raise errors.DebenchRuntimeError(f"Run already terminated after {self.generations} generations")
        population = self.population
        F, CR = self._config.F, self._config.CR
        for i, target in enumerate(population):
            r1, r2, r3 = select_donors(i, len(population), self.random_state)
            mutant = population[r1].position + F * (population[r2].position - population[r3].position)
            np.clip(mutant, self.lower, self.upper, out=mutant)
            trial = binomial_crossover(mutant, target.position, CR, self.random_state)
            fitness = self._evaluate(trial)
            if fitness <= target.fitness:  # ties favor the trial
                target.assign(trial, fitness)
                if fitness < self.best.fitness:
                    self._best = target.copy()
        self.generation += 1
        for callback in self._callbacks.get("generation", []):
            callback(self)

    def run(self) -> Recommendation:
        """Performs all remaining generations and returns the best candidate seen"""
        t0 = time.time()
        self.population  # pylint: disable=pointless-statement
        while not self.terminated:
            self.step()
        logger.debug(
            "%s finished %s generations in %.3fs with fitness %s",
            self._config.name,
            self.generation,
            time.time() - t0,
            self.best.fitness,
        )
        return self.recommend()

    def recommend(self) -> Recommendation:
        best = self.best
        return Recommendation(
            fitness=best.fitness,
            position=best.position.copy(),
            generations=self.generation,
            num_evaluations=self.num_evaluations,
        )

    def __repr__(self) -> str:
        return f"Run of {self._config!r} (dimension={self.dimension}, generation={self.generation}/{self.generations})"


def _check_settings(dimension: int, lower: float, upper: float, generations: int) -> None:
    if not _is_int(dimension) or dimension < 1:
        raise errors.ConfigurationError(f"Dimension must be a positive integer (got {dimension!r})")
    if not all(isinstance(b, numbers.Real) and math.isfinite(b) for b in (lower, upper)) or lower >= upper:
        raise errors.ConfigurationError(f"Bounds must be finite with lower < upper (got [{lower}, {upper}])")
    if not _is_int(generations) or generations < 0:
        raise errors.ConfigurationError(f"Number of generations must be a non-negative integer (got {generations!r})")


def _is_int(value: tp.Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


class DifferentialEvolution:
    """Differential evolution with DE/rand/1 mutation and binomial crossover,
    for minimizing a function in a box.

    For each slot i of the population, a mutant is built from three other random slots as
    x[r1] + F * (x[r2] - x[r3]), clipped into the bounds, then mixed with x[i] through binomial
    crossover. The trial replaces x[i] if its fitness is lower or equal.

    Parameters
    ----------
    F: float
        differential weight (mutation strength), typically in (0, 1]
    CR: float
        crossover rate (probability for each coordinate to come from the mutant), typically in [0, 1]
    popsize: int
        size of the population, at least 4
    """

    def __init__(self, *, F: float = 0.8, CR: float = 0.9, popsize: int = 40) -> None:
        if not _is_int(popsize) or popsize < 4:
            raise errors.ConfigurationError(f"Population size must be an integer >= 4 (got {popsize!r})")
        if not isinstance(F, numbers.Real) or not isinstance(CR, numbers.Real):
            raise errors.ConfigurationError(f"F and CR must be real numbers (got F={F!r}, CR={CR!r})")
        if not 0 <= CR <= 1:
            warnings.warn(f"Crossover rate CR={CR} is outside [0, 1]", errors.InefficientSettingsWarning)
        if not 0 < F <= 2:
            warnings.warn(f"Differential weight F={F} is outside (0, 2]", errors.InefficientSettingsWarning)
        self.F = float(F)
        self.CR = float(CR)
        self.popsize = int(popsize)
        self.name = f"DifferentialEvolution(F={self.F}, CR={self.CR}, popsize={self.popsize})"

    def set_name(self, name: str, register: bool = False) -> "DifferentialEvolution":
        """Set a new representation for the instance, and optionally registers it"""
        self.name = name
        if register:
            registry.register_name(name, self)
        return self

    @property
    def settings(self) -> tp.Dict[str, tp.Any]:
        return {"F": self.F, "CR": self.CR, "popsize": self.popsize}

    def __call__(
        self,
        function: tp.Objective,
        dimension: int,
        lower: float,
        upper: float,
        generations: int,
        random_state: tp.RandomStateLike = None,
    ) -> _DE:
        """Creates a run of this configuration, without starting it"""
        return _DE(self, function, dimension, lower, upper, generations, random_state=random_state)

    def minimize(
        self,
        function: tp.Objective,
        dimension: int,
        lower: float,
        upper: float,
        generations: int,
        random_state: tp.RandomStateLike = None,
        callbacks: tp.Optional[tp.Iterable[GenerationCallback]] = None,
    ) -> Recommendation:
        """Runs differential evolution and returns the best point found

        Parameters
        ----------
        function: callable
            the function to minimize, taking a 1-dimensional array and returning a float
        dimension: int
            dimension of the search space (>= 1)
        lower, upper: float
            bounds of the search space, for all coordinates (lower < upper)
        generations: int
            number of generations to perform (>= 0)
        random_state: None, int or np.random.RandomState
            source of randomness: None for an unseeded random state, an int for a seeded one,
            or a random state which will be used (and modified) directly
        callbacks: iterable of callables
            functions called with the run as argument after each generation

        Returns
        -------
        Recommendation
            best fitness and position found, number of generations and of evaluations
        """
        run = self(function, dimension, lower, upper, generations, random_state=random_state)
        for callback in callbacks or []:
            run.register_callback("generation", callback)
        return run.run()

    def __repr__(self) -> str:
        return self.name

    def __eq__(self, other: tp.Any) -> bool:
        if isinstance(other, self.__class__):
            return self.settings == other.settings
        return False

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.settings.items())))


DE = DifferentialEvolution().set_name("DE", register=True)
BaselineDE = DifferentialEvolution(F=0.8, CR=0.9).set_name("BaselineDE", register=True)
ExplorationDE = DifferentialEvolution(F=0.9, CR=0.5).set_name("ExplorationDE", register=True)
ExploitationDE = DifferentialEvolution(F=0.5, CR=0.9).set_name("ExploitationDE", register=True)
BalancedDE = DifferentialEvolution(F=0.6, CR=0.6).set_name("BalancedDE", register=True)
AggressiveMutationDE = DifferentialEvolution(F=1.0, CR=0.3).set_name("AggressiveMutationDE", register=True)

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import math
import numbers
import numpy as np
import debench.common.typing as tp
from debench.common import errors


def evaluate(function: tp.Objective, position: np.ndarray) -> float:
    """Evaluates the function on a position and checks that the output is a usable fitness.

    Raises
    ------
    EvaluatorError
        if the function raised, or returned something which is not a real number, or NaN.
        Infinite values are accepted.
    """
    try:
        value = function(position)
    except errors.EvaluatorError:
        raise
    except Exception as e:
        raise errors.EvaluatorError(f"Objective function failed on {position}: {e!r}") from e
    if isinstance(value, np.ndarray) and value.size == 1:
        value = value.item()
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise errors.EvaluatorError(
            f"Objective function returned {value!r} of type {type(value)} instead of a real number"
        )
    value = float(value)
    if math.isnan(value):
        raise errors.EvaluatorError(f"Objective function returned NaN for {position}")
    return value


class Candidate:
    """Point of the search space, together with the fitness it obtained

    Parameters
    ----------
    position: array-like
        coordinates of the point (copied)
    fitness: float
        fitness of the position, +inf meaning that it was not evaluated yet

    Note
    ----
    Position and fitness are only updated together (see "assign" and "evaluate"),
    so that the fitness always corresponds to the position.
    """

    def __init__(self, position: tp.ArrayLike, fitness: float = float("inf")) -> None:
        self.position = np.array(position, dtype=float)
        if self.position.ndim != 1:
            raise errors.ConfigurationError(f"Position must be 1-dimensional, got shape {self.position.shape}")
        self.fitness = float(fitness)

    @property
    def dimension(self) -> int:
        return self.position.size

    @property
    def evaluated(self) -> bool:
        return self.fitness != float("inf")

    def evaluate(self, function: tp.Objective) -> "Candidate":
        self.fitness = evaluate(function, self.position)
        return self

    def assign(self, position: np.ndarray, fitness: float) -> None:
        """Overwrites the position (values are copied into the candidate storage) and its fitness"""
        self.position[:] = position
        self.fitness = float(fitness)

    def copy(self) -> "Candidate":
        """Returns an independent copy of the candidate"""
        return Candidate(self.position, self.fitness)

    def __repr__(self) -> str:
        return f"Candidate(fitness={self.fitness}, position={self.position.tolist()})"


class Population:
    """Fixed-size collection of candidates, indexed by slot (from 0 to len - 1)

    Parameters
    ----------
    candidates: list of Candidate
        the candidates, which are not copied (the population takes ownership)
    """

    def __init__(self, candidates: tp.List[Candidate]) -> None:
        if not candidates:
            raise errors.ConfigurationError("A population requires at least one candidate")
        dims = {c.dimension for c in candidates}
        if len(dims) > 1:
            raise errors.ConfigurationError(f"All candidates must have the same dimension, got {sorted(dims)}")
        if len({id(c) for c in candidates}) != len(candidates):
            raise errors.ConfigurationError("A candidate cannot fill several slots of a population")
        self._candidates = list(candidates)

    @classmethod
    def random(
        cls,
        function: tp.Objective,
        dimension: int,
        size: int,
        lower: float,
        upper: float,
        random_state: np.random.RandomState,
    ) -> "Population":
        """Draws a population uniformly in [lower, upper]^dimension, candidate after candidate,
        each candidate being evaluated right after it is drawn.
        """
        candidates = []
        for _ in range(size):
            position = lower + random_state.uniform(size=dimension) * (upper - lower)
            candidates.append(Candidate(position).evaluate(function))
        return cls(candidates)

    @property
    def dimension(self) -> int:
        return self._candidates[0].dimension

    @property
    def positions(self) -> np.ndarray:
        """Copy of all positions, as an array of shape (size, dimension)"""
        return np.array([c.position for c in self._candidates])

    @property
    def fitnesses(self) -> np.ndarray:
        return np.array([c.fitness for c in self._candidates])

    def best(self) -> Candidate:
        """Candidate with the lowest fitness (the first one in case of ties).
        This is the candidate itself, not a copy.
        """
        return min(self._candidates, key=lambda c: c.fitness)

    def __getitem__(self, index: int) -> Candidate:
        return self._candidates[index]

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> tp.Iterator[Candidate]:
        return iter(self._candidates)

    def __repr__(self) -> str:
        return f"Population(size={len(self)}, dimension={self.dimension}, best={self.best().fitness})"

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import debench.common.typing as tp
from debench.common import errors
from . import corefuncs

OF = tp.TypeVar("OF", bound="ObjectiveFunction")


class ObjectiveFunction:
    """Function of the catalog prepared for running experiments: it counts its evaluations
    and can add a uniform noise to its output (see benchmark subpackage)

    Parameters
    ----------
    name: str
        name of the underlying function (like "sphere" for instance). If a wrong
        name is provided, an error is raised with all existing names.
    noise_level: float
        the output is f(x) + noise_level * u with u uniform in [0, 1), drawn from the
        function own random state (0 for a deterministic function)
    seed: int or None
        seed of the noise random state

    Note
    ----
    Each instance owns its random state, so that independent runs should use independent copies
    (see "copy").
    """

    def __init__(self, name: str, noise_level: float = 0.0, seed: tp.Optional[int] = None) -> None:
        if name not in corefuncs.registry:
            raise errors.ConfigurationError(
                f'Unknown function "{name}", available names are:\n{sorted(corefuncs.registry)}'
            )
        if noise_level < 0:
            raise errors.ConfigurationError(f"noise_level must be non-negative (got {noise_level})")
        self.name = name
        self.noise_level = float(noise_level)
        self.random_state = np.random.RandomState(seed)
        self.num_evaluations = 0
        self._function = corefuncs.registry[name]

    @property
    def function(self) -> tp.Objective:
        return self._function

    def __call__(self, x: tp.ArrayLike) -> float:
        self.num_evaluations += 1
        value = self._function(np.asarray(x, dtype=float))
        if self.noise_level:
            value += self.noise_level * self.random_state.uniform()
        return value

    @property
    def descriptors(self) -> tp.Dict[str, tp.Any]:
        """Description of the function as a dict, to be added to the benchmark results"""
        return {"function": self.name, "noise_level": self.noise_level}

    def copy(self: OF, seed: tp.Optional[int] = None) -> OF:
        """Provides a new instance of the same function, with its own evaluation count and noise stream"""
        return self.__class__(self.name, noise_level=self.noise_level, seed=seed)

    def equivalent_to(self, other: tp.Any) -> bool:
        """Checks that two instances were initialized with the same settings (the noise stream may differ)"""
        return isinstance(other, ObjectiveFunction) and self.descriptors == other.descriptors

    def __repr__(self) -> str:
        params = [f"{x}={repr(y)}" for x, y in sorted(self.descriptors.items())]
        return "{}({})".format(self.__class__.__name__, ", ".join(params))

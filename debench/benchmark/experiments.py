# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import debench.common.typing as tp
from debench.functions import corefuncs
from debench.functions import ObjectiveFunction
from .xpbase import Experiment as Experiment
from .xpbase import create_seed_generator
from .xpbase import registry as registry  # noqa

# pylint: disable=too-many-arguments

# F/CR combinations compared in the sweeps
CONFIGS = ["BaselineDE", "ExplorationDE", "ExploitationDE", "BalancedDE", "AggressiveMutationDE"]
# the quartic function is historically evaluated with an additive uniform noise in [0, 1)
NOISE_LEVELS = {"quartic": 1.0}


def suite() -> tp.List[ObjectiveFunction]:
    """All functions of the catalog, in the order of their historical index (f1 to f10)"""
    names = sorted(corefuncs.registry, key=lambda name: corefuncs.registry.get_info(name).get("index", 0))
    return [ObjectiveFunction(name, noise_level=NOISE_LEVELS.get(name, 0.0)) for name in names]


def _sweep(
    functions: tp.Sequence[ObjectiveFunction],
    optimizers: tp.Sequence[str],
    seed: tp.Optional[int],
    dimension: int,
    generations: int,
    runs: int,
    lower: float = -10.0,
    upper: float = 10.0,
) -> tp.Iterator[Experiment]:
    seedg = create_seed_generator(seed)
    for func in functions:
        for optim in optimizers:
            for _ in range(runs):
                yield Experiment(
                    func, optim, dimension=dimension, lower=lower, upper=upper, generations=generations, seed=next(seedg)
                )


@registry.register
def fcr_sweep(seed: tp.Optional[int] = None) -> tp.Iterator[Experiment]:
    """All functions of the catalog in dimension 30, with the 5 F/CR configurations,
    10 runs each, 2000 generations of a population of 40 in [-10, 10]^30.
    """
    yield from _sweep(suite(), CONFIGS, seed, dimension=30, generations=2000, runs=10)


@registry.register
def fcr_sweep_small(seed: tp.Optional[int] = None) -> tp.Iterator[Experiment]:
    """Smaller version of fcr_sweep: dimension 10, 200 generations, 3 runs"""
    yield from _sweep(suite(), CONFIGS, seed, dimension=10, generations=200, runs=3)


@registry.register
def basic(seed: tp.Optional[int] = None) -> tp.Iterator[Experiment]:
    """Test settings"""
    functions = [ObjectiveFunction("sphere"), ObjectiveFunction("quartic", noise_level=1.0)]
    yield from _sweep(functions, ["BaselineDE", "AggressiveMutationDE"], seed, dimension=3, generations=10, runs=2)

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import itertools
import numpy as np
from debench.common import testing
from . import experiments


@testing.parametrized(
    fcr_sweep=("fcr_sweep", 500, 30, 2000),
    fcr_sweep_small=("fcr_sweep_small", 150, 10, 200),
    basic=("basic", 8, 3, 10),
)
def test_experiment_plans(name: str, length: int, dimension: int, generations: int) -> None:
    maker = experiments.registry[name]
    xps = list(maker())
    assert len(xps) == length
    assert all(isinstance(xp, experiments.Experiment) for xp in xps)
    assert {xp.dimension for xp in xps} == {dimension}
    assert {xp.generations for xp in xps} == {generations}
    assert all(xp.seed is None for xp in xps)
    # seeded plans are repeatable
    seeded = [list(itertools.islice(maker(seed=12), 0, 4)) for _ in range(2)]
    assert seeded[0] == seeded[1]
    assert len({xp.seed for xp in seeded[0]}) == 4


def test_registry_content() -> None:
    testing.assert_set_equal(experiments.registry, ["fcr_sweep", "fcr_sweep_small", "basic"])


def test_suite() -> None:
    funcs = experiments.suite()
    names = [f.name for f in funcs]
    assert names[0] == "sphere"
    assert names[6] == "quartic"
    assert names[-1] == "ackley"
    assert len(names) == 10
    np.testing.assert_array_equal([f.noise_level for f in funcs], [0.0] * 6 + [1.0] + [0.0] * 3)


def test_sweep_order() -> None:
    xps: tp.List[experiments.Experiment] = list(itertools.islice(experiments.fcr_sweep(seed=1), 0, 21))
    # runs of a configuration are consecutive, then configurations, then functions
    assert [xp.optimizer.name for xp in xps[:11]] == ["BaselineDE"] * 10 + ["ExplorationDE"]
    assert {xp.function.name for xp in xps[:20]} == {"sphere"}
    assert [xp.optimizer.F for xp in xps[::10]][:3] == [0.8, 0.9, 0.5]


def test_run_first_basic_experiment() -> None:
    xp = next(experiments.basic(seed=12))
    summary = xp.run()
    assert summary["error"] == ""
    assert summary["loss"] >= 0

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Catalog of classical continuous test functions, all to be minimized.
Functions are registered with their historical index (f1 to f10) as information.
"""

from math import exp, sqrt
import numpy as np
import debench.common.typing as tp
from debench.common.decorators import Registry


registry: Registry[tp.Objective] = Registry("function")


def get_function_by_index(index: int) -> str:
    """Returns the name of the function registered with the provided historical index (1 for f1 etc)"""
    names = registry.find(index=index)
    if not names:
        raise KeyError(f"No function with index {index}")
    return names[0]


@registry.register_with_info(index=1)
def sphere(x: np.ndarray) -> float:
    """The most classical continuous optimization testbed.

    If you do not solve that one then you have a bug."""
    assert x.ndim == 1
    return float(x.dot(x))


@registry.register_with_info(index=2)
def schwefel_2_22(x: np.ndarray) -> float:
    """Sum plus product of the absolute values."""
    absx = np.abs(x)
    return float(np.sum(absx) + np.prod(absx))


@registry.register_with_info(index=3)
def schwefel_1_2(x: np.ndarray) -> float:
    """Sum of the squared partial sums, non separable."""
    cx = np.cumsum(x)
    return sphere(cx)


@registry.register_with_info(index=4)
def schwefel_2_21(x: np.ndarray) -> float:
    """Largest absolute value among the coordinates."""
    return float(np.max(np.abs(x)))


@registry.register_with_info(index=5)
def rosenbrock(x: np.ndarray) -> float:
    x_m_1 = x[:-1] - 1
    x_diff = x[:-1] ** 2 - x[1:]
    return float(100 * x_diff.dot(x_diff) + x_m_1.dot(x_m_1))


@registry.register_with_info(index=6)
def step(x: np.ndarray) -> float:
    """Sphere on rounded values: the gradient is zero almost everywhere."""
    return sphere(np.floor(x + 0.5))


@registry.register_with_info(index=7)
def quartic(x: np.ndarray) -> float:
    """Weighted sum of fourth powers. Historically used with a uniform noise in [0, 1),
    see ObjectiveFunction's noise_level.
    """
    weights = np.arange(1, x.size + 1)
    return float(weights.dot(x ** 4))


@registry.register_with_info(index=8)
def schwefel(x: np.ndarray) -> float:
    """Deceptive multimodal function, the best local optima being far from each other."""
    return float(np.sum(-x * np.sin(np.sqrt(np.abs(x)))))


@registry.register_with_info(index=9)
def rastrigin(x: np.ndarray) -> float:
    """Classical multimodal function."""
    cosi = float(np.sum(np.cos(2 * np.pi * x)))
    return float(10 * (len(x) - cosi) + sphere(x))


@registry.register_with_info(index=10)
def ackley(x: np.ndarray) -> float:
    dim = x.size
    sum_cos = np.sum(np.cos(2 * np.pi * x))
    return -20.0 * exp(-0.2 * sqrt(sphere(x) / dim)) - exp(sum_cos / dim) + 20 + exp(1)

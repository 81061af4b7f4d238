# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import pytest
import numpy as np
from . import testing


@testing.parametrized(
    equal=([2, 3, 1], ""),
    missing=((1, 2), ["  - missing element(s): {3}."]),
    additional=((1, 4, 3, 2), ["  - additional element(s): {4}."]),
    both=((1, 2, 4), ["  - additional element(s): {4}.", "  - missing element(s): {3}."]),
)
def test_assert_set_equal(estimate: tp.Iterable[int], message: str) -> None:
    reference = {1, 2, 3}
    try:
        testing.assert_set_equal(estimate, reference)
    except AssertionError as error:
        if not message:
            raise AssertionError("An error has been raised while it should not.")
        np.testing.assert_equal(error.args[0].split("\n")[1:], message)
    else:
        if message:
            raise AssertionError("An error should have been raised.")


def test_assert_within_bounds() -> None:
    testing.assert_within_bounds([[-1.0, 0.0], [1.0, 0.5]], -1, 1)
    with pytest.raises(AssertionError, match="1 value"):
        testing.assert_within_bounds([-1.0, 1.5], -1, 1)


@testing.parametrized(
    single=(1,),
    other=(2,),
)
def test_parametrized_single_argument(value: int) -> None:
    assert value in (1, 2)

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
from unittest import TestCase
import numpy as np
from . import decorators
from . import errors


class RegistryTests(TestCase):
    def test_registry(self) -> None:
        functions: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()
        other: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()

        @functions.register
        def dummy() -> int:
            return 12

        np.testing.assert_equal(dummy(), 12)
        np.testing.assert_array_equal(list(functions.keys()), ["dummy"])
        np.testing.assert_array_equal(list(other.keys()), [])
        functions.unregister("dummy")
        functions.unregister("other_dummy_that_does_not_exist")
        np.testing.assert_array_equal(list(functions.keys()), [])

    def test_info_and_find(self) -> None:
        functions: decorators.Registry[tp.Callable[[], int]] = decorators.Registry("function")

        @functions.register_with_info(index=3)
        def three() -> int:
            return 3

        @functions.register
        def plain() -> int:
            return 0

        np.testing.assert_equal(three(), 3)
        np.testing.assert_equal(functions.get_info("three"), {"index": 3})
        np.testing.assert_equal(functions.get_info("plain"), {})
        np.testing.assert_equal(functions.find(index=3), ["three"])
        np.testing.assert_equal(functions.find(index=4), [])
        with self.assertRaisesRegex(errors.DebenchValueError, 'Function "nothing"'):
            functions.get_info("nothing")

    def test_registry_collision(self) -> None:
        functions: decorators.Registry[tp.Any] = decorators.Registry()

        @functions.register
        def dummy() -> int:
            return 12

        np.testing.assert_raises(errors.DebenchRuntimeError, functions.register, dummy)
        functions.register_name("alias", dummy)
        assert functions["alias"] is dummy

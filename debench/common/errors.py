# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# base classes


class DebenchError(Exception):
    """Base class for error raised by debench"""


class DebenchWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class DebenchRuntimeError(RuntimeError, DebenchError):
    """Runtime error raised by debench"""


class DebenchValueError(ValueError, DebenchError):
    """Value error raised by debench"""


class ConfigurationError(DebenchValueError):
    """Invalid settings for a run (population size, dimension, bounds, number of generations,
    unknown function...). Raised before any evaluation takes place.
    """


class EvaluatorError(DebenchRuntimeError):
    """The objective function failed, or returned a value which is not a usable fitness (eg: NaN)"""


class UnknownExperimentError(DebenchValueError):
    """Raised when requesting an experiment plan which is not registered"""


# warnings


class DebenchRuntimeWarning(RuntimeWarning, DebenchWarning):
    """Runtime warning raised by debench"""


class InefficientSettingsWarning(DebenchRuntimeWarning):
    """Settings are accepted but unusual for the optimizer (eg: crossover rate outside [0, 1])"""

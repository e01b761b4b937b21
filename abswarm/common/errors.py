# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import unittest


# base classes


class AbsError(Exception):
    """Base class for error raised by abswarm"""


class AbsWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class AbsRuntimeError(RuntimeError, AbsError):
    """Runtime error raised by abswarm"""


class AbsTypeError(TypeError, AbsError):
    """Type error raised by abswarm"""


class AbsValueError(ValueError, AbsError):
    """Value error raised by abswarm (mostly invalid configurations)"""


class BudgetExhaustedError(AbsRuntimeError):
    """Raised when an evaluation is requested while the budget is already consumed"""


class UnsupportedExperiment(unittest.SkipTest, AbsRuntimeError):
    """Raised if the experiment is not compatible with the current settings:
    Eg: missing external evaluator for a benchmark suite.
    This automatically skips tests.
    """


# warnings


class AbsRuntimeWarning(RuntimeWarning, AbsWarning):
    """Runtime warning raised by abswarm"""


class InefficientSettingsWarning(AbsRuntimeWarning):
    """Optimization settings are not optimal for the optimizer"""


class BadLossWarning(AbsRuntimeWarning):
    """Provided loss is unhelpful (NaN or infinite)"""

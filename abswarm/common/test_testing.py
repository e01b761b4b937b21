# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import pytest
import numpy as np
from . import testing
from . import tools


@testing.parametrized(
    inside=([0.0, -5.0, 5.0], False),
    below=([0.0, -5.1, 1.0], True),
    above=([[0.0, 6.0]], True),
)
def test_assert_within_bounds(data: tp.Any, should_fail: bool) -> None:
    if should_fail:
        with pytest.raises(AssertionError, match="out of"):
            testing.assert_within_bounds(data, -5.0, 5.0)
    else:
        testing.assert_within_bounds(data, -5.0, 5.0)


def test_assert_non_increasing() -> None:
    testing.assert_non_increasing([3.0, 2.0, 2.0, 0.5])
    testing.assert_non_increasing([])
    with pytest.raises(AssertionError, match="index 2"):
        testing.assert_non_increasing([3.0, 2.0, 2.5])


@testing.parametrized(
    start=(0.0, 0.99),
    middle=(0.5, 0.595),
    end=(1.0, 0.2),
    clipped=(1.5, 0.2),
)
def test_linear_interpolation(progress: float, expected: float) -> None:
    np.testing.assert_almost_equal(tools.linear_interpolation(0.99, 0.2, progress), expected)


class _Dummy:
    def __init__(self, a: int = 1, b: str = "x") -> None:
        self.a = a
        self.b = b


def test_different_from_defaults() -> None:
    instance = _Dummy(b="y")
    assert tools.different_from_defaults(instance=instance) == {"b": "y"}
    assert tools.different_from_defaults(instance=instance, instance_dict={"a": 2, "b": "x"}) == {"a": 2}
    with pytest.raises(RuntimeError, match="Mismatch"):
        tools.different_from_defaults(instance=instance, instance_dict={"a": 2}, check_mismatches=True)

# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import inspect
import typing as tp
try:
    import pytest
except ImportError:
    pass  # makes most of this module usable without pytest
import numpy as np


def assert_within_bounds(data: tp.Any, lower: float, upper: float, err_msg: str = "") -> None:
    """Asserts that all coordinates of the array lie in [lower, upper],
    listing the faulty indices otherwise.
    This function should only be used in tests.
    """
    data = np.asarray(data)
    faulty = np.argwhere((data < lower) | (data > upper))
    if faulty.size:
        message = f"Coordinates out of [{lower}, {upper}] at indices {faulty.ravel().tolist()}: {data}"
        raise AssertionError("\n".join(([err_msg] if err_msg else []) + [message]))


def assert_non_increasing(values: tp.Sequence[float], err_msg: str = "") -> None:
    """Asserts that a sequence never increases (eg: best loss along a run)"""
    diffs = np.diff(np.asarray(values, dtype=float))
    increases = np.nonzero(diffs > 0)[0]
    if increases.size:
        ind = int(increases[0])
        message = f"Sequence increases at index {ind + 1}: {values[ind]} -> {values[ind + 1]}"
        raise AssertionError("\n".join(([err_msg] if err_msg else []) + [message]))


class parametrized:
    """Simplified decorator API for specifying named parametrized test with pytests
    (like with old "genty" package)
    See example of use in test_testing

    Parameters
    ----------
    **kwargs:
        name of the argument is converted as id of the experiments, and the provided tuple
        contains a value for each of the arguments of the underlying function (in the definition order).
    """

    def __init__(self, **kwargs: tp.Tuple[tp.Any, ...]):
        self.ids = sorted(kwargs)
        self.params = tuple(kwargs[name] for name in self.ids)
        assert self.params
        self.num_params = len(self.params[0])
        assert all(isinstance(p, (tuple, list)) for p in self.params)
        assert all(self.num_params == len(p) for p in self.params[1:])

    def __call__(self, func: tp.Callable[..., None]) -> tp.Any:  # type is lost here :(
        names = list(inspect.signature(func).parameters.keys())
        assert len(names) == self.num_params, f"Parameter names: {names}"
        return pytest.mark.parametrize(
            ",".join(names), self.params if self.num_params > 1 else [p[0] for p in self.params], ids=self.ids
        )(func)

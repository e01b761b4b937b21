# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from . import corefuncs as corefuncs
from .benchmarks import BenchmarkFunction as BenchmarkFunction
from .benchmarks import CECFunction as CECFunction

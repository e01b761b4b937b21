# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .core import compute as compute
from .core import summarize as summarize
from .experiments import registry as registry
from .xpbase import Experiment as Experiment

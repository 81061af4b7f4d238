# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .population import Candidate as Candidate
from .population import Population as Population
from .differentialevolution import DifferentialEvolution as DifferentialEvolution
from .differentialevolution import Recommendation as Recommendation
from .differentialevolution import registry as registry
from . import callbacks as callbacks

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import re
import numpy as np
import debench as db


def test_version() -> None:
    assert re.match(r"^\d+\.\d+\.\d+$", db.__version__)


def test_public_namespace() -> None:
    func = db.functions.ObjectiveFunction("sphere")
    reco = db.optimizers.DE.minimize(func, dimension=2, lower=-1, upper=1, generations=3, random_state=0)
    assert isinstance(reco, db.optimizers.Recommendation)
    assert reco.fitness == func(reco.position)
    assert issubclass(db.errors.ConfigurationError, ValueError)
    assert isinstance(reco.position, np.ndarray)

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import time
import logging
import numpy as np
from debench.functions import corefuncs
from . import differentialevolution as de
from . import callbacks


def test_generation_logger(caplog) -> None:  # type: ignore
    logger = logging.getLogger(__name__)
    glogger = callbacks.GenerationLogger(logger=logger, log_level=logging.INFO, log_interval_generations=10)
    with caplog.at_level(logging.INFO, logger=__name__):
        de.DifferentialEvolution(popsize=6).minimize(
            corefuncs.sphere, dimension=2, lower=-1, upper=1, generations=30, random_state=12, callbacks=[glogger]
        )
    messages = [r.getMessage() for r in caplog.records if r.name == __name__]
    assert len(messages) == 3
    assert messages[0].startswith("After 10 generations (66 evaluations), best fitness is ")
    assert messages[-1].startswith("After 30 generations (186 evaluations)")


def test_best_fitness_recorder() -> None:
    recorder = callbacks.BestFitnessRecorder()
    reco = de.DE.minimize(
        corefuncs.schwefel_1_2, dimension=3, lower=-5, upper=5, generations=12, random_state=3, callbacks=[recorder]
    )
    assert len(recorder.fitnesses) == 12
    assert recorder.fitnesses[-1] == reco.fitness
    assert np.all(np.diff(recorder.fitnesses) <= 0)


def test_generation_logger_timer_starts_with_run(caplog) -> None:  # type: ignore
    logger = logging.getLogger(__name__)
    glogger = callbacks.GenerationLogger(logger=logger, log_interval_generations=1000, log_interval_seconds=0.5)
    time.sleep(0.6)  # building the logger long before the run must not trigger a log
    with caplog.at_level(logging.INFO, logger=__name__):
        de.DifferentialEvolution(popsize=6).minimize(
            corefuncs.sphere, dimension=2, lower=-1, upper=1, generations=3, random_state=12, callbacks=[glogger]
        )
    assert not [r for r in caplog.records if r.name == __name__]

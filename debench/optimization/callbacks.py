# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import time
import logging
import debench.common.typing as tp
from . import differentialevolution as de

global_logger = logging.getLogger(__name__)


class GenerationLogger:
    """Logger to register as "generation" callback in a run, for logging
    the best fitness regularly.

    Parameters
    ----------
    logger:
        given logger that callback will use to log
    log_level:
        log level that logger will write to
    log_interval_generations: int
        max number of generations before performing another log
    log_interval_seconds:
        max number of seconds before performing another log
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_generations: int = 1,
        log_interval_seconds: float = 60.0,
    ) -> None:
        assert log_interval_generations > 0
        assert log_interval_seconds > 0
        self._logger = logger
        self._log_level = log_level
        self._log_interval_generations = int(log_interval_generations)
        self._log_interval_seconds = log_interval_seconds
        self._next_generation = self._log_interval_generations
        self._next_time: tp.Optional[float] = None

    def __call__(self, run: "de._DE") -> None:
        if self._next_time is None:  # timer starts with the run
            self._next_time = time.time() + self._log_interval_seconds
        if time.time() >= self._next_time or run.generation >= self._next_generation:
            self._next_time = time.time() + self._log_interval_seconds
            self._next_generation = run.generation + self._log_interval_generations
            self._logger.log(
                self._log_level,
                "After %s generations (%s evaluations), best fitness is %s",
                run.generation,
                run.num_evaluations,
                run.best.fitness,
            )


class BestFitnessRecorder:
    """Records the best fitness of a run after each generation

    Example
    -------

    .. code-block:: python

        recorder = BestFitnessRecorder()
        DE.minimize(func, dimension=5, lower=-10, upper=10, generations=100, callbacks=[recorder])
        recorder.fitnesses  # list of 100 non-increasing values
    """

    def __init__(self) -> None:
        self.fitnesses: tp.List[float] = []

    def __call__(self, run: "de._DE") -> None:
        self.fitnesses.append(run.best.fitness)

# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import time
import traceback
import numpy as np
import debench.common.typing as tp
from debench.common import decorators
from debench.common import errors
from debench.functions import ObjectiveFunction
from debench.optimization import differentialevolution as de


registry: decorators.Registry[tp.Callable[..., tp.Iterator["Experiment"]]] = decorators.Registry("experiment plan")


def create_seed_generator(seed: tp.Optional[int]) -> tp.Iterator[tp.Optional[int]]:
    """Create a stream of seeds, independent from the standard random stream.
    This is designed to be used in experiment plans generators, for reproducibility.

    Parameter
    ---------
    seed: int or None
        the initial seed

    Yields
    ------
    int or None
        potential new seeds, or None if the initial seed was None
    """
    generator = None if seed is None else np.random.RandomState(seed=seed)
    while True:
        yield None if generator is None else int(generator.randint(2 ** 32, dtype=np.uint32))


class Experiment:
    """Specifies one run of a differential evolution configuration on a function, which can be run in benchmarks.

    Parameters
    ----------
    function: ObjectiveFunction
        the function to minimize (it is copied for each run, so that its evaluation count and noise are not shared)
    optimizer: str or DifferentialEvolution
        the configuration, or its name in the optimization registry
    dimension: int
        dimension of the search space
    lower, upper: float
        bounds of the search space
    generations: int
        number of generations of the run
    seed: int or None
        seed of the run, making it repeatable if provided

    Note
    ----
    - "run" method catches error but forwards stderr so that errors are not completely hidden
    - "run" method outputs the description of the experiment, which is a set of figures/names from the functions
      settings, the optimization settings and the results (loss, etc...)
    """

    # pylint: disable=too-many-arguments,too-many-instance-attributes
    def __init__(
        self,
        function: ObjectiveFunction,
        optimizer: tp.Union[str, de.DifferentialEvolution],
        dimension: int,
        lower: float = -10.0,
        upper: float = 10.0,
        generations: int = 2000,
        seed: tp.Optional[int] = None,
    ) -> None:
        assert isinstance(function, ObjectiveFunction), "Experiment functions should be ObjectiveFunction instances"
        if isinstance(optimizer, str):
            if optimizer not in de.registry:
                raise errors.ConfigurationError(f'Optimizer "{optimizer}" is not registered')
            optimizer = de.registry[optimizer]
        self.function = function
        self.optimizer = optimizer
        self.dimension = dimension
        self.lower = lower
        self.upper = upper
        self.generations = generations
        self.seed = seed
        self.result: tp.Dict[str, tp.Any] = {
            "loss": np.nan,
            "elapsed_budget": np.nan,
            "elapsed_time": np.nan,
            "error": "",
        }
        self.recommendation: tp.Optional[de.Recommendation] = None

    def __repr__(self) -> str:
        return (
            f"Experiment: {self.optimizer}<generations={self.generations}> (dim={self.dimension}) "
            f"on {self.function} with seed {self.seed}"
        )

    def run(self) -> tp.Dict[str, tp.Any]:
        """Run an experiment with the provided settings

        Returns
        -------
        dict
            A dict containing all the information about the experiments (optimizer/function settings + results)

        Note
        ----
        This function catches error (but forwards stderr). It fills up the "error" ("" if no error, else the error name),
        "loss", "elapsed_time" and "elapsed_budget" of the experiment.
        Configuration errors are not caught, since they would happen for all runs.
        """
        try:
            self._run_with_error()
        except errors.ConfigurationError as ex:
            raise ex
        except Exception as e:  # pylint: disable=broad-except
            # print the case and the traceback
            self.result["error"] = e.__class__.__name__
            print(f"Error when applying {self}:", file=sys.stderr)
            traceback.print_exc()
            print("\n", file=sys.stderr)
        return self.get_description()

    def _run_with_error(self) -> None:
        random_state = np.random.RandomState(self.seed)
        # the noise stream of the function is seeded from the run random state, but separate from it
        noise_seed = None if self.seed is None else int(random_state.randint(2 ** 32, dtype=np.uint32))
        pfunc = self.function.copy(seed=noise_seed)
        t0 = time.time()
        try:
            self.recommendation = self.optimizer.minimize(
                pfunc,
                dimension=self.dimension,
                lower=self.lower,
                upper=self.upper,
                generations=self.generations,
                random_state=random_state,
            )
        finally:
            self.result["elapsed_time"] = time.time() - t0
            self.result["elapsed_budget"] = pfunc.num_evaluations
        self.result["loss"] = self.recommendation.fitness

    def get_description(self) -> tp.Dict[str, tp.Any]:
        """Return the description of the experiment, as a dict.
        "run" must be called beforehand in order to have non-nan values for the loss.
        """
        summary = dict(self.result, seed=-1 if self.seed is None else self.seed)
        summary.update(self.function.descriptors)
        summary.update(self.optimizer.settings)
        summary.update(
            optimizer_name=self.optimizer.name,
            dimension=self.dimension,
            lower=self.lower,
            upper=self.upper,
            generations=self.generations,
        )
        return summary

    def __eq__(self, other: tp.Any) -> bool:
        if not isinstance(other, Experiment):
            return False
        same_seed = other.seed is None if self.seed is None else other.seed == self.seed
        return (
            same_seed
            and self.function.equivalent_to(other.function)
            and self.optimizer == other.optimizer
            and (self.dimension, self.lower, self.upper, self.generations)
            == (other.dimension, other.lower, other.upper, other.generations)
        )

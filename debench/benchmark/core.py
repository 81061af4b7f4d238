# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import datetime
import itertools
import importlib.util
from pathlib import Path
import numpy as np
import pandas as pd
import debench.common.typing as tp
from debench.common import errors
from .experiments import registry as registry
from .experiments import Experiment as Experiment
from .execution import SequentialExecutor
from . import utils

logger = logging.getLogger(__name__)

# columns identifying a configuration when averaging runs
SUMMARY_KEYS = ["function", "noise_level", "optimizer_name", "F", "CR", "popsize", "dimension", "generations"]


def import_additional_module(filepath: tp.PathLike) -> None:
    """Imports an additional file at runtime (eg: for registering new functions, configurations
    or experiment plans)

    Parameter
    ---------
    filepath: str or Path
        the file to import
    """
    filepath = Path(filepath)
    spec = importlib.util.spec_from_file_location(
        "debench.additionalimport." + filepath.with_suffix("").name, str(filepath)
    )
    assert spec is not None and spec.loader is not None, f"Could not import {filepath}"
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)  # type: ignore


def save_or_append_to_csv(df: pd.DataFrame, path: Path) -> None:
    """Saves a dataframe to a file in append mode"""
    if path.exists():
        logger.info("Appending to existing file %s", path)
        predf = pd.read_csv(str(path))
        df = pd.concat([predf, df], sort=False)
    df.to_csv(path, index=False)


def summarize(df: pd.DataFrame) -> utils.Selector:
    """Averages the final losses of all runs of each configuration on each function

    Returns
    -------
    Selector
        one row per (function, configuration), with the number of runs and of failed runs,
        and the mean, standard deviation, min and max of the losses (failed runs are ignored)
    """
    keys = [k for k in SUMMARY_KEYS if k in df.columns]
    df = df.assign(failed=df["error"].fillna("").astype(str) != "")
    groups = df.groupby(keys, sort=False)
    summary = groups.agg(
        num_runs=("loss", "size"),
        num_errors=("failed", "sum"),
        mean_loss=("loss", "mean"),
        std_loss=("loss", "std"),
        min_loss=("loss", "min"),
        max_loss=("loss", "max"),
    )
    return utils.Selector(summary.reset_index())


class Moduler:
    """Provides a selector of indices based on the modulo
    moduler(number) will be true iff number = modulo * k + index with k an integer

    Parameters
    ----------
    modulo: int
        modulo for number selection
    index: int
        the congruence of the number for the moduler function to evaluate to True
    total_length: int or None
        total length of the sequence the moduler will be applied on. If provided,
        this allows to compute the length of the modulated sequence.
    """

    def __init__(self, modulo: int, index: int, total_length: tp.Optional[int] = None) -> None:
        assert modulo > 0, "Modulo must be strictly positive"
        assert index < modulo, "Index must be strictly smaller than modulo"
        self.modulo = modulo
        self.index = index
        self.total_length = total_length

    def split(self, number: int) -> tp.List["Moduler"]:
        return [Moduler(self.modulo * number, self.index + k * self.modulo, self.total_length) for k in range(number)]

    def __len__(self) -> int:
        if self.total_length is None:
            raise RuntimeError("Cannot give an expected length if total_length was not provided")
        return self.total_length // self.modulo + (self.index < self.total_length % self.modulo)

    def __call__(self, index: int) -> bool:
        return (index % self.modulo) == self.index

    def __repr__(self) -> str:
        return f"Moduler({self.index}, {self.modulo}, total_length={self.total_length})"


class BenchmarkChunk:
    """Splittable chunk of an experiment plan

    Parameters
    ----------
    name: str
        Name of the experiment plan
    seed: int
        A seed for the experiment plan
    cap_index: int
        index at which the experiment plan must be stopped (convenient for testing if the experiment
        plan holds 10k experiment, we can select the first cap_index=100 for instance)
    """

    def __init__(self, name: str, seed: tp.Optional[int] = None, cap_index: tp.Optional[int] = None) -> None:
        if name not in registry:
            raise errors.UnknownExperimentError(
                f'Experiment plan "{name}" is not registered, available plans are:\n{sorted(registry)}'
            )
        self.name = name
        self.seed = seed
        self.cap_index = None if cap_index is None else max(1, int(cap_index))
        self._moduler: tp.Optional[Moduler] = None
        self.summaries: tp.List[tp.Dict[str, tp.Any]] = []
        self._id = (
            datetime.datetime.now().strftime("%y-%m-%d_%H%M")
            + "_"
            + "".join(np.random.choice(list("abcdefghijklmnopqrstuvwxyz"), 4))
        )

    @property
    def moduler(self) -> Moduler:
        if self._moduler is None:
            total_length = sum(1 for _ in itertools.islice(registry[self.name](), 0, self.cap_index))
            self._moduler = Moduler(1, 0, total_length=total_length)
        return self._moduler

    @property
    def id(self) -> str:
        """Unique ID which can be used to print in a file for instance"""
        return f"{self._id}_i{self.moduler.index}m{self.moduler.modulo}"

    def __iter__(self) -> tp.Iterator[tp.Tuple[int, Experiment]]:
        maker = registry[self.name]
        generator = itertools.islice(maker(seed=self.seed), 0, self.cap_index)
        return ((k, xp) for k, xp in enumerate(generator) if self.moduler(k))

    def split(self, number: int) -> tp.List["BenchmarkChunk"]:
        """Create n BenchmarkChunk which split the experiments of the current BenchmarkChunk"""
        chunks = []
        for submoduler in self.moduler.split(number):
            chunk = BenchmarkChunk(name=self.name, seed=self.seed, cap_index=self.cap_index)
            chunk._moduler = submoduler
            chunk._id = self._id
            chunks.append(chunk)
        return chunks

    def __repr__(self) -> str:
        return f"BenchmarkChunk({self.name}, {self.seed}) with {self.moduler}"

    def __len__(self) -> int:
        return len(self.moduler)

    def compute(self, process_function: tp.Optional[tp.Callable[[tp.Dict[str, tp.Any]], None]] = None) -> utils.Selector:
        """Run all the experiments and returns the result dataframe.

        Parameters
        ----------
        process_function: tp.Callable
            a function called with the summary of each experiment once it is finished
        """
        for local_ind, (index, xp) in enumerate(self):
            if local_ind < len(self.summaries):
                continue  # already computed
            indstr = f"{index} ({local_ind + 1}/{len(self)} of worker)"
            logger.info("Starting %s: %s", indstr, xp)
            summary = xp.run()
            if process_function is not None:
                process_function(summary)
            self.summaries.append(summary)
            logger.info("Finished %s with loss %s", indstr, summary["loss"])
        return utils.Selector(data=self.summaries)


def _submit_jobs(
    experiment_name: str,
    num_workers: int = 1,
    seed: tp.Optional[int] = None,
    executor: tp.Optional[tp.ExecutorLike] = None,
    process_function: tp.Optional[tp.Callable[[tp.Dict[str, tp.Any]], None]] = None,
    cap_index: tp.Optional[int] = None,
) -> tp.List[tp.JobLike[utils.Selector]]:
    if executor is None:
        if num_workers > 1:
            raise ValueError("An executor must be provided to run multiple jobs in parallel")
        executor = SequentialExecutor()
    jobs: tp.List[tp.JobLike[utils.Selector]] = []
    bench = BenchmarkChunk(name=experiment_name, seed=seed, cap_index=cap_index)
    for chunk in bench.split(num_workers):
        # split experiment this way to avoid one job running most slow settings
        jobs.append(executor.submit(chunk.compute, process_function))
    return jobs


# pylint: disable=too-many-arguments
def compute(
    experiment_name: str,
    num_workers: int = 1,
    seed: tp.Optional[int] = None,
    executor: tp.Optional[tp.ExecutorLike] = None,
    process_function: tp.Optional[tp.Callable[[tp.Dict[str, tp.Any]], None]] = None,
    cap_index: tp.Optional[int] = None,
) -> utils.Selector:
    """Runs an experiment plan, possibly distributed over several workers

    Parameters
    ----------
    experiment_name: str
        name of the experiment plan (must be registered in experiments.registry)
    num_workers: int
        number of workers onto which the jobs will be distributed
    seed: int
        a seed for the experiment plan
    executor: Executor-like object
        an object such as concurrent.futures.ProcessPoolExecutor for running experiments in parallel
    process_function: tp.Callable
        a function called with the summary of each experiment once it is finished (for custom logging),
        it must be picklable if the executor uses several processes
    cap_index: int
        index at which the experiment plan must be stopped (convenient for testing if the experiment
        plan holds 10k experiment, we can select the first cap_index=100 for instance)

    Returns
    -------
    Selector
        The dataframe summarizing all the experiments (each experiment is a line)
    """
    # pylint: disable=unused-argument
    jobs = _submit_jobs(**locals())
    dfs = [j.result() for j in jobs]
    return utils.Selector(pd.concat(dfs, ignore_index=True))

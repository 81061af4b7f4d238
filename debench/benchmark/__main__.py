# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import os
import logging
import argparse
from pathlib import Path
from concurrent import futures
import pandas as pd
import debench.common.typing as tp
from . import utils
from . import core

logger = logging.getLogger(__name__)


# pylint: disable=too-many-arguments
def launch(
    experiment: str,
    num_workers: int = 1,
    seed: tp.Optional[int] = None,
    cap_index: tp.Optional[int] = None,
    output: tp.Optional[tp.PathLike] = None,
) -> Path:
    """Launch experiment plan with given name, and saves the results into a csv file
    cap_index can be specified to run only a limited number of settings
    """
    csvpath = Path(experiment + ".csv") if output is None else Path(output)
    if num_workers == 1:
        df = core.compute(experiment, cap_index=cap_index, seed=seed)
    else:
        with futures.ProcessPoolExecutor(max_workers=num_workers) as executor:
            df = core.compute(
                experiment, seed=seed, cap_index=cap_index, executor=executor, num_workers=num_workers
            )
    # save data to csv
    try:
        core.save_or_append_to_csv(df, csvpath)
    except OSError as e:
        csvpath = Path(experiment + ".csv")
        logger.warning("Failed to save to %s (%r), falling back to %s", output, e, csvpath)
        core.save_or_append_to_csv(df, csvpath)
    print(f"Saved data to {csvpath}")
    return csvpath


def get_args(argv: tp.Optional[tp.List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a differential evolution experiment plan and create a result csv file."
    )
    parser.add_argument(
        "experiment", type=str, help="name of an experiment plan registered in the experiments registry"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Use a seed for reproducibility (otherwise all runs are unseeded)",
    )
    parser.add_argument(
        "--cap_index", type=int, default=None, help="Stop after generating/running settings #cap_index"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path for the CSV file (default: <experiment>.csv). Existing files are appended",
    )
    parser.add_argument(
        "--imports",
        type=str,
        default=None,
        help="Comma-separated list of file paths with additional function(s), configuration(s) "
        "and/or experiment plan(s) definitions",
    )
    parser.add_argument(
        "--num_workers",
        type=int,
        default=1,
        help="Numbers of workers to use for the computation (splits the job in chunks)",
    )
    parser.add_argument(
        "--repetitions",
        type=int,
        default=1,
        help="Number of repetitions to perform for the experiment plan (seeds will be incremented)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Prints the average loss of each configuration on each function at the end",
    )
    return parser.parse_args(argv)


def repeated_launch(
    experiment: str,
    num_workers: int = 1,
    seed: tp.Optional[int] = None,
    cap_index: tp.Optional[int] = None,
    output: tp.Optional[tp.PathLike] = None,
    imports: tp.Optional[tp.List[tp.PathLike]] = None,
    repetitions: int = 1,
    summary: bool = False,
) -> Path:
    """Launch experiment plan with given name several times, incrementing the seed.
    This returns the path of the csv file holding the results.
    """
    # start by importing additional content
    if imports is not None:
        assert isinstance(imports, (tuple, list))
        for path in imports:
            core.import_additional_module(path)
    csvpath = Path(experiment + ".csv")
    for k in range(repetitions):
        logger.info("Starting repetition %s / %s", k + 1, repetitions)
        csvpath = launch(
            experiment,
            num_workers=num_workers,
            cap_index=cap_index,
            output=output,
            seed=None if seed is None else seed + k,
        )
    if summary:
        df = core.summarize(utils.Selector.read_csv(csvpath))
        with pd.option_context("display.max_rows", None, "display.width", 200, "display.precision", 15):
            print(df.to_string(index=False))
    return csvpath


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))
    args = get_args()
    repeated_launch(
        args.experiment,
        num_workers=args.num_workers,
        cap_index=args.cap_index,
        output=args.output,
        seed=args.seed,
        imports=args.imports if args.imports is None else args.imports.split(","),
        repetitions=args.repetitions,
        summary=args.summary,
    )

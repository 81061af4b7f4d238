# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import tempfile
from pathlib import Path
from concurrent import futures
import pytest
import numpy as np
import pandas as pd
from debench.common import errors
from debench.common import testing
from . import utils
from . import core
from .__main__ import get_args
from .__main__ import repeated_launch
from .test_xpbase import DESCRIPTION_KEYS


@testing.parametrized(
    val0=(0, False),
    val1=(1, True),
    val5=(5, False),
    val6=(6, True),
)
def test_moduler(value: int, expected: bool) -> None:
    moduler = core.Moduler(5, 1)
    np.testing.assert_equal(moduler(value), expected)


@testing.parametrized(
    no_remainder=(3, 0, 9, 3),
    first=(3, 0, 10, 4),
    second=(3, 1, 10, 3),
)
def test_moduler_length(modulo: int, index: int, total: int, expected: int) -> None:
    assert len(core.Moduler(modulo, index, total_length=total)) == expected


def test_compute() -> None:
    output = core.compute("basic", seed=12)
    assert isinstance(output, utils.Selector)
    assert len(output) == 8
    testing.assert_set_equal(output.columns, DESCRIPTION_KEYS)
    assert set(output.error) == {""}
    assert output.unique("function") == {"sphere", "quartic"}


def test_compute_with_executor() -> None:
    reference = core.compute("basic", seed=12)
    with futures.ThreadPoolExecutor(max_workers=3) as executor:
        output = core.compute("basic", seed=12, executor=executor, num_workers=3)
    assert len(output) == 8
    np.testing.assert_array_equal(output.sort_values("seed").loss, reference.sort_values("seed").loss)


def test_compute_errors() -> None:
    with pytest.raises(ValueError, match="executor"):
        core.compute("basic", num_workers=2)
    with pytest.raises(errors.UnknownExperimentError, match="available plans"):
        core.compute("blublu")


def test_chunk_split() -> None:
    chunk = core.BenchmarkChunk("basic", seed=12, cap_index=5)
    assert len(chunk) == 5
    subchunks = chunk.split(2)
    assert [len(c) for c in subchunks] == [3, 2]
    indices = sorted(k for c in subchunks for k, _ in c)
    assert indices == list(range(5))
    assert subchunks[0].id != subchunks[1].id


def test_summarize() -> None:
    df = utils.Selector(
        [
            dict(function="sphere", optimizer_name="A", F=0.5, CR=0.9, loss=1.0, error=""),
            dict(function="sphere", optimizer_name="A", F=0.5, CR=0.9, loss=3.0, error=""),
            dict(function="sphere", optimizer_name="B", F=0.8, CR=0.9, loss=2.0, error=""),
            dict(function="sphere", optimizer_name="B", F=0.8, CR=0.9, loss=np.nan, error="EvaluatorError"),
            dict(function="ackley", optimizer_name="A", F=0.5, CR=0.9, loss=4.0, error=np.nan),
        ]
    )
    summary = core.summarize(df)
    assert isinstance(summary, utils.Selector)
    assert list(summary.function) == ["sphere", "sphere", "ackley"]
    assert list(summary.optimizer_name) == ["A", "B", "A"]
    np.testing.assert_array_equal(summary.num_runs, [2, 2, 1])
    np.testing.assert_array_equal(summary.num_errors, [0, 1, 0])
    np.testing.assert_array_equal(summary.mean_loss, [2.0, 2.0, 4.0])
    np.testing.assert_array_equal(summary.min_loss, [1.0, 2.0, 4.0])
    np.testing.assert_array_equal(summary.max_loss, [3.0, 2.0, 4.0])
    np.testing.assert_almost_equal(summary.std_loss[0], np.sqrt(2))


def test_summarize_computed() -> None:
    summary = core.summarize(core.compute("basic", seed=3))
    assert len(summary) == 4
    np.testing.assert_array_equal(summary.num_runs, [2] * 4)
    assert list(summary.optimizer_name) == ["BaselineDE", "AggressiveMutationDE"] * 2


def test_save_or_append_to_csv() -> None:
    df = pd.DataFrame([{"a": 1, "b": 2}, {"a": 3, "b": 4}])
    with tempfile.TemporaryDirectory() as folder:
        path = Path(folder) / "test.csv"
        core.save_or_append_to_csv(df, path)
        core.save_or_append_to_csv(df, path)
        output = utils.Selector.read_csv(path)
    np.testing.assert_array_equal(output.a, [1, 3, 1, 3])


def test_repeated_launch(capsys) -> None:  # type: ignore
    with tempfile.TemporaryDirectory() as folder:
        output = Path(folder) / "launch_test.csv"
        path = repeated_launch("basic", seed=12, cap_index=3, output=output, repetitions=2, summary=True)
        assert path == output
        df = utils.Selector.read_csv(output)
    assert len(df) == 6
    assert len(set(df.seed)) == 6
    printed = capsys.readouterr().out
    assert f"Saved data to {output}" in printed
    assert "mean_loss" in printed


def test_get_args() -> None:
    args = get_args(["basic", "--seed", "12", "--num_workers", "2", "--summary"])
    assert args.experiment == "basic"
    assert args.seed == 12
    assert args.num_workers == 2
    assert args.summary
    assert args.repetitions == 1


def test_import_additional_module() -> None:
    code = (
        "from debench.benchmark.experiments import registry, Experiment\n"
        "from debench.functions import ObjectiveFunction\n\n\n"
        "@registry.register\n"
        "def additional_plan(seed=None):\n"
        "    yield Experiment(ObjectiveFunction('rastrigin'), 'BalancedDE', dimension=2, generations=2, seed=seed)\n"
    )
    with tempfile.TemporaryDirectory() as folder:
        filepath = Path(folder) / "additional.py"
        filepath.write_text(code)
        core.import_additional_module(filepath)
    try:
        output = core.compute("additional_plan", seed=1)
        assert list(output.function) == ["rastrigin"]
    finally:
        core.registry.unregister("additional_plan")


def test_select_summary_rows() -> None:
    summary = core.summarize(core.compute("basic", seed=3))
    quartic = summary.select(function="quartic", optimizer_name=["BaselineDE", "AggressiveMutationDE"])
    assert len(quartic) == 2
    assert quartic.unique("function") == {"quartic"}
    baseline = summary.select_and_drop(optimizer_name=lambda name: name.startswith("Baseline"))
    assert isinstance(baseline, utils.Selector)
    assert "optimizer_name" not in baseline.columns
    assert baseline.unique(["function", "F", "CR"]) == {("sphere", 0.8, 0.9), ("quartic", 0.8, 0.9)}

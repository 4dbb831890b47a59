from __future__ import annotations

import random
import stat
from pathlib import Path

import pytest

from wrsubmit.dsl import definition, function, pipeline
from wrsubmit.options import OptionsBuilder
from wrsubmit.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def fresh_console():
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture
def rng():
    return random.Random(20180411)


@pytest.fixture
def make_wr(tmp_path):
    """Factory for a stub wr executable that records its arguments and exits with `exit_code`."""
    def _make(exit_code: int = 0) -> tuple[Path, Path]:
        args_file = tmp_path / "wr_args.txt"
        script = tmp_path / f"wr_stub_{exit_code}"
        script.write_text(f'#!/bin/sh\necho "$@" > "{args_file}"\nexit {exit_code}\n')
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script, args_file
    return _make


@pytest.fixture
def options_builder(tmp_path):
    return OptionsBuilder(tmp_path / "analysis")


@pytest.fixture
def diamond():
    """
        start
        /   \\
     qc_a   qc_b
        \\   /
        merge
    """
    stamp = "20240101-000000"
    return pipeline(
        function("start", definition("run1", "echo start", created_on=stamp)),
        function(
            "qc_a",
            definition("run1_1", "qc a 1", created_on=stamp),
            definition("run1_2", "qc a 2", created_on=stamp),
            needs=["start"],
        ),
        function("qc_b", definition("run1", "qc b", num_cpus=[4], created_on=stamp), needs=["start"]),
        function("merge", definition("run1", "merge", memory=8000, created_on=stamp), needs=["qc_a", "qc_b"]),
    )

# executor/wr.py
"""
Submission of pipeline function definitions for execution by the wr
workflow runner (https://github.com/VertebrateResequencing/wr).

Every function becomes a wr dependency group. Jobs of a function depend on
the dependency groups of its upstream functions, so downstream work starts
only after all jobs of all upstream functions have finished.
"""
from __future__ import annotations

import json
import secrets
import shlex
import subprocess
from pathlib import Path
from random import Random
from typing import Dict, List, Optional, Sequence

from ..errors import (
    DEFINING,
    SAVING,
    SUBMITTING,
    GroupAssignmentError,
    PhaseError,
    ResourceParseError,
    StructuralDependencyError,
    SubmissionError,
)
from ..graph import FunctionGraph
from ..model import JobDefinition, WrJob
from ..options import ExecutorOptions
from ..ui.console import get_console
from .base import Executor

VERTEX_GROUP_DEP_ID_ATTR_NAME = "wr_group_id"
DEFAULT_MEMORY = 2000
MEMORY_UNIT = "M"
LOG_EXTENSION = ".out"
SEPARATOR = "-"

# Could be made configurable if ever needed
WR_CWD = "/tmp"
WR_DISK = 0
WR_OVERRIDE = 2
WR_RETRIES = 0


# ----------------------------------------------------------------------
# wr job building
# ----------------------------------------------------------------------

def generate_group_id(function_name: str, identifier: str, rng: Random) -> str:
    """Dependency group id, unique across runs sharing the same wr manager."""
    return SEPARATOR.join([function_name, identifier, str(rng.getrandbits(64))])


def memory4job(d: JobDefinition) -> str:
    value = d.memory if d.has_memory() else DEFAULT_MEMORY
    return f"{value}{MEMORY_UNIT}"


def cpus4job(d: JobDefinition) -> Optional[int]:
    if not d.has_num_cpus():
        return None
    value = d.num_cpus[0]
    if isinstance(value, bool):
        raise ResourceParseError(d.identifier, value)
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise ResourceParseError(d.identifier, value) from e


def log_file4job(function_name: str, log_dir: str | Path, d: JobDefinition) -> str:
    label = d.composition.freeze2rpt() if d.has_composition() else d.identifier
    name = SEPARATOR.join([function_name, d.created_on, label]) + LOG_EXTENSION
    return str(Path(log_dir) / name)


def wrap_command(command: str, log_file: str) -> str:
    # pipefail keeps the exit code of the command rather than the one of tee
    return f"set -o pipefail; ( {command} ) 2>&1 | tee {shlex.quote(log_file)}"


def report_group(function_name: str, d: JobDefinition, prefix: Optional[str] = None) -> str:
    parts = [d.identifier, function_name]
    if prefix:
        parts.insert(0, prefix)
    return SEPARATOR.join(parts)


def wr_job4definition(
    function_name: str,
    log_dir: str | Path,
    d: JobDefinition,
    group_id: str,
    depends_on: Sequence[str] = (),
    prefix: Optional[str] = None,
) -> WrJob:
    """Translate one job definition into a wr job."""
    return WrJob(
        memory=memory4job(d),
        cpus=cpus4job(d),
        cmd=wrap_command(d.command, log_file4job(function_name, log_dir, d)),
        deps=list(depends_on),
        dep_grps=[group_id],
        rep_grp=report_group(function_name, d, prefix),
    )


def serialize(job: WrJob) -> str:
    """Canonical JSON: sorted keys, no whitespace."""
    return json.dumps(job.to_dict(), sort_keys=True, separators=(",", ":"))


# ----------------------------------------------------------------------
# Executor
# ----------------------------------------------------------------------

class WrExecutor(Executor):
    """Creates and submits wr jobs."""

    executor_type = "wr"

    def __init__(
        self,
        function_graph: FunctionGraph,
        function_definitions: Dict[str, List[JobDefinition]],
        options: ExecutorOptions,
        rng: Optional[Random] = None,
    ):
        super().__init__(function_graph, function_definitions, options)
        self._rng = rng if rng is not None else secrets.SystemRandom()

    def execute(self) -> None:
        """
        Define wr jobs for all functions, save them to the commands file and
        add them to wr. The first error aborts; it is re-raised as PhaseError
        naming the phase it happened in.
        """
        self.commands4jobs = {}
        # each attempt gets fresh group ids and its own commands file
        self._graph4jobs = None
        self._commands_file = None
        action = DEFINING
        try:
            for function in self.function_graph4jobs().topological_sort():
                self._process_function(function)
            action = SAVING
            self.save_commands4jobs(
                serialize(job)
                for jobs in self.commands4jobs.values()
                for job in jobs
            )
            action = SUBMITTING
            self._submit()
        except Exception as e:
            raise PhaseError(action, e) from e

    def _process_function(self, function: str) -> None:
        g = self.function_graph4jobs()
        # Upstream dependency group ids are needed to link wr jobs
        depends_on: List[str] = []
        if not g.is_source_vertex(function):
            depends_on = self.dependencies(function, VERTEX_GROUP_DEP_ID_ATTR_NAME)
            # every upstream function must already have its group
            if not depends_on or len(depends_on) != len(g.predecessors(function)):
                raise StructuralDependencyError(function)

        group_id = self._definitions4function(function, depends_on)
        if not group_id:
            raise GroupAssignmentError(function)

        g.set_vertex_attribute(function, VERTEX_GROUP_DEP_ID_ATTR_NAME, group_id)
        get_console().print_debug(
            f"Function {function}: group {group_id}, depends on {depends_on or 'nothing'}"
        )

    def _definitions4function(self, function_name: str, depends_on: List[str]) -> Optional[str]:
        definitions = self.function_definitions().get(function_name) or []
        if not definitions:
            return None

        group_id = generate_group_id(function_name, definitions[0].identifier, self._rng)
        log_dir = self.future_log_path(definitions, self.log_dir4function(function_name))

        jobs = self.commands4jobs.setdefault(function_name, [])
        for d in definitions:
            if d.excluded:
                continue
            jobs.append(
                wr_job4definition(
                    function_name,
                    log_dir,
                    d,
                    group_id,
                    depends_on,
                    prefix=self.options.job_name_prefix,
                )
            )

        return group_id

    def wr_add_command(self) -> str:
        priority = self.options.job_priority if self.options.has_job_priority() else 0
        common_options = [
            ("--cwd", WR_CWD),
            ("--disk", WR_DISK),
            ("--override", WR_OVERRIDE),
            ("--priority", priority),
            ("--retries", WR_RETRIES),
        ]
        parts = [shlex.quote(self.options.wr_binary), "add"]
        for name, value in common_options:
            parts.extend([name, str(value)])
        parts.extend(["-f", shlex.quote(str(self.commands4jobs_file_path()))])
        return " ".join(parts)

    def _submit(self) -> None:
        console = get_console()
        cmd = self.wr_add_command()
        console.print_info(f"Command to use with wr: {cmd}")
        if self.options.interactive:
            console.print_info("Interactive mode, commands not added to wr")
            return

        proc = subprocess.run(cmd, shell=True)
        if proc.returncode != 0:
            raise SubmissionError(command=cmd, exit_code=proc.returncode)
        console.print_info("Commands successfully added to wr")

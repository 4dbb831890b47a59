# executor/base.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..graph import FunctionGraph
from ..model import JobDefinition
from ..options import ExecutorOptions
from ..ui.console import get_console


@dataclass
class ExecutionResult:
    """Result of running an executor."""
    status: str  # "success" | "failed"
    commands_file: Optional[str] = None
    error: Optional[Exception] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "commands_file": self.commands_file,
            "error": str(self.error) if self.error else None,
        }


class Executor:
    """
    Base class for executors that submit pipeline function definitions to a
    batch system.

    Holds the function graph, the job definitions of each function and the
    run options, and provides the services concrete executors share: the
    graph of functions that produce jobs, upstream dependency lookup, log
    locations and persistence of the generated commands.
    """

    executor_type = "base"

    def __init__(
        self,
        function_graph: FunctionGraph,
        function_definitions: Dict[str, List[JobDefinition]],
        options: ExecutorOptions,
    ):
        self.function_graph = function_graph
        self._function_definitions = function_definitions
        self.options = options
        self.commands4jobs: Dict[str, list] = {}
        self._graph4jobs: Optional[FunctionGraph] = None
        self._commands_file: Optional[Path] = None

    def execute(self) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Graph services
    # ------------------------------------------------------------------

    def function_definitions(self) -> Dict[str, List[JobDefinition]]:
        return self._function_definitions

    def function_graph4jobs(self) -> FunctionGraph:
        """
        The function graph without functions whose definitions are all
        excluded. Upstream and downstream neighbours of a dropped function are
        connected directly so that ordering is preserved.
        """
        if self._graph4jobs is None:
            g = self.function_graph.copy()
            for name in self.function_graph.vertices():
                defs = self._function_definitions.get(name) or []
                if defs and all(d.excluded for d in defs):
                    get_console().print_debug(f"Function {name} is excluded, no jobs")
                    g.delete_vertex_bridged(name)
            self._graph4jobs = g
        return self._graph4jobs

    def dependencies(self, function_name: str, attr_name: str) -> List[str]:
        """Values of `attr_name` recorded on the upstream functions of `function_name`."""
        g = self.function_graph4jobs()
        values = []
        for upstream in g.predecessors(function_name):
            value = g.get_vertex_attribute(upstream, attr_name)
            if value:
                values.append(value)
        return values

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def log_dir4function(self, function_name: str) -> Path:
        log_dir = Path(self.options.log_dir) / function_name
        if not self.options.interactive:
            log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir

    def future_log_path(self, definitions: List[JobDefinition], log_dir: Path | str) -> str:
        """
        Where logs will be by the time the jobs run. A log directory set on
        the definitions wins over the function's one. When the run folder moves
        to outgoing before the jobs start, the analysis path segment is swapped.
        """
        path = str(log_dir)
        if definitions and definitions[0].log_file_dir:
            path = definitions[0].log_file_dir
        if self.options.future_path_is_in_outgoing:
            path = re.sub(r"/analysis/", "/outgoing/", path, count=1)
        return path

    def commands4jobs_file_path(self) -> Path:
        if self._commands_file is None:
            stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
            name = f"commands4jobs_{self.executor_type}_{stamp}.json"
            self._commands_file = Path(self.options.analysis_path) / name
        return self._commands_file

    def save_commands4jobs(self, records: Iterable[str]) -> Path:
        """Write one serialized job per line to the commands file."""
        path = self.commands4jobs_file_path()
        records = list(records)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as f:
            for record in records:
                f.write(record)
                f.write("\n")
        get_console().print_info(f"Saved {len(records)} {self.executor_type} job definition(s) to {path}")
        return path


def run_executor(executor: Executor) -> ExecutionResult:
    """Run an executor and report the outcome as a value."""
    try:
        executor.execute()
    except Exception as e:
        commands_file = executor.commands4jobs_file_path()
        return ExecutionResult(
            status="failed",
            commands_file=str(commands_file) if commands_file.exists() else None,
            error=e,
        )
    return ExecutionResult(status="success", commands_file=str(executor.commands4jobs_file_path()))

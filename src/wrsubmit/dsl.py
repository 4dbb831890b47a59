# src/wrsubmit/dsl.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .graph import FunctionGraph
from .model import Component, Composition, JobDefinition


# ---------------------------------------------------------------------
# Definition helpers
# ---------------------------------------------------------------------

def composition(*rpts: str) -> Composition:
    """composition("26291:1", "26291:2:3") -> Composition of two components."""
    components = []
    for rpt in rpts:
        parts = rpt.split(":")
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid rpt string {rpt!r}, expected id_run:position[:tag_index]")
        try:
            numbers = [int(p) for p in parts]
        except ValueError as e:
            raise ValueError(f"Invalid rpt string {rpt!r}") from e
        components.append(Component(*numbers))
    return Composition(tuple(components))


def definition(
    identifier: str,
    command: str = "",
    *,
    memory: Optional[int] = None,
    num_cpus: Optional[Sequence[Union[int, float, str]]] = None,
    composition: Optional[Composition] = None,
    created_on: Optional[str] = None,
    excluded: bool = False,
    immediate_mode: bool = False,
    log_file_dir: Optional[str] = None,
) -> JobDefinition:
    """Create a job definition."""
    kwargs = {}
    if created_on is not None:
        kwargs["created_on"] = created_on
    return JobDefinition(
        identifier=identifier,
        command=command,
        memory=memory,
        num_cpus=tuple(num_cpus) if num_cpus is not None else None,
        composition=composition,
        excluded=excluded,
        immediate_mode=immediate_mode,
        log_file_dir=log_file_dir,
        **kwargs,
    )


# ---------------------------------------------------------------------
# Functions and pipelines
# ---------------------------------------------------------------------

@dataclass
class Function:
    """A pipeline function: its job definitions and the functions it runs after."""
    name: str
    definitions: List[JobDefinition] = field(default_factory=list)
    needs: List[str] = field(default_factory=list)


@dataclass
class Pipeline:
    """A function graph plus the job definitions of every function in it."""
    graph: FunctionGraph
    definitions: Dict[str, List[JobDefinition]]

    def job_count(self) -> int:
        return sum(1 for defs in self.definitions.values() for d in defs if not d.excluded)


def function(
    name: str,
    *definitions: JobDefinition,  # allow: function("x", definition(...), definition(...))
    needs: Optional[List[str]] = None,
) -> Function:
    return Function(name=name, definitions=list(definitions), needs=list(needs or []))


class FunctionBuilder:
    def __init__(self, name: str):
        self.name = name
        self._needs: list[str] = []
        self._definitions: list[JobDefinition] = []

    def runs_after(self, *function_names: str):
        self._needs.extend(function_names)
        return self

    def define_job(self, identifier: str, command: str, **kwargs):
        self._definitions.append(definition(identifier, command, **kwargs))
        return self

    def with_definitions(self, *definitions: JobDefinition):
        self._definitions.extend(definitions)
        return self

    def build(self) -> Function:
        return Function(name=self.name, definitions=list(self._definitions), needs=list(self._needs))


def build(name: str) -> FunctionBuilder:
    """Convenience: build('qc').define_job(...).build()"""
    return FunctionBuilder(name)


def pipeline(*functions: Function) -> Pipeline:
    """
    Assemble functions into a Pipeline.

        from wrsubmit import pipeline, function, definition

        def pipeline_definition():
            return pipeline(
                function("start", definition("run1", "echo start")),
                function("qc", definition("run1_1", "qc 1"), needs=["start"]),
            )
    """
    names = [f.name for f in functions]
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"Duplicate function names found: {dupes}")

    graph = FunctionGraph(names)
    for f in functions:
        for upstream in f.needs:
            if upstream not in graph:
                raise ValueError(
                    f"Function '{f.name}' needs missing function '{upstream}'. "
                    f"Known functions: {sorted(names)}"
                )
            graph.add_edge(upstream, f.name)
    # fail early on cycles
    graph.topological_sort()

    return Pipeline(graph=graph, definitions={f.name: list(f.definitions) for f in functions})


def definitions_from_records(records: Iterable[dict]) -> List[JobDefinition]:
    """Build definitions from plain dictionaries, e.g. parsed from JSON."""
    out: List[JobDefinition] = []
    for rec in records:
        rec = dict(rec)
        comp = rec.pop("composition", None)
        if comp is not None:
            rec["composition"] = composition(*comp)
        try:
            identifier = rec.pop("identifier")
        except KeyError as e:
            raise ValueError(f"Job definition record without identifier: {rec}") from e
        out.append(definition(identifier, **rec))
    return out

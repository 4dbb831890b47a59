# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


@dataclass(frozen=True)
class Component:
    """One lane (or one tagged entity within a lane) of a sequencing run."""
    id_run: int
    position: int
    tag_index: Optional[int] = None

    @property
    def rpt(self) -> str:
        parts = [str(self.id_run), str(self.position)]
        if self.tag_index is not None:
            parts.append(str(self.tag_index))
        return ":".join(parts)


@dataclass(frozen=True)
class Composition:
    """An ordered set of components a job acts on."""
    components: Tuple[Component, ...]

    def __post_init__(self) -> None:
        if not self.components:
            raise ValueError("Composition must have at least one component")

    def freeze2rpt(self) -> str:
        return ";".join(sorted(c.rpt for c in self.components))


@dataclass(frozen=True)
class JobDefinition:
    """
    Immutable description of one unit of work produced by a pipeline function.

    `num_cpus` is an ordered list of cpu counts; only the first element is used
    when a job is submitted. An excluded definition does not produce a job.
    """
    identifier: str
    command: str = ""
    created_on: str = field(default_factory=_timestamp)
    memory: Optional[int] = None
    num_cpus: Optional[Tuple[Union[int, float, str], ...]] = None
    composition: Optional[Composition] = None
    excluded: bool = False
    immediate_mode: bool = False
    log_file_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("Job definition identifier is required")
        if not self.excluded and not self.command:
            raise ValueError(f"Job definition '{self.identifier}' has no command")
        if self.num_cpus is not None:
            # lists are accepted for convenience, stored as a tuple
            object.__setattr__(self, "num_cpus", tuple(self.num_cpus))
            if not self.num_cpus:
                raise ValueError(f"Job definition '{self.identifier}': num_cpus cannot be empty")
        if self.memory is not None:
            if isinstance(self.memory, bool) or not isinstance(self.memory, int) or self.memory <= 0:
                raise ValueError(
                    f"Job definition '{self.identifier}': memory must be a positive integer, got {self.memory!r}"
                )

    def has_memory(self) -> bool:
        return self.memory is not None

    def has_num_cpus(self) -> bool:
        return self.num_cpus is not None

    def has_composition(self) -> bool:
        return self.composition is not None


@dataclass
class WrJob:
    """A single wr job, as added with `wr add -f`."""
    memory: str
    cmd: str
    dep_grps: List[str]
    rep_grp: str
    cpus: Optional[int] = None
    deps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        job_dict: Dict[str, Any] = {
            "memory": self.memory,
            "cmd": self.cmd,
            "dep_grps": list(self.dep_grps),
            "rep_grp": self.rep_grp,
        }
        # Optional fields are left out entirely rather than written empty
        if self.cpus is not None:
            job_dict["cpus"] = self.cpus
        if self.deps:
            job_dict["deps"] = list(self.deps)
        return job_dict

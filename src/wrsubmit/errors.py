# errors.py
from __future__ import annotations

from dataclasses import dataclass

# Phases of WrExecutor.execute(), used to tag errors
DEFINING = "defining"
SAVING = "saving"
SUBMITTING = "submitting"


class WrSubmitError(Exception):
    """Base class for errors raised while turning functions into wr jobs."""


@dataclass
class StructuralDependencyError(WrSubmitError):
    """A non-source function has no upstream dependency group to depend on."""
    function: str

    def __str__(self) -> str:
        return f'"{self.function}" should depend on at least one job'


@dataclass
class GroupAssignmentError(WrSubmitError):
    """Processing a function did not give a dependency group id."""
    function: str

    def __str__(self) -> str:
        return f'Group dependency id should be returned for "{self.function}"'


@dataclass
class ResourceParseError(WrSubmitError):
    identifier: str
    value: object

    def __str__(self) -> str:
        return f"Job '{self.identifier}': cpu count {self.value!r} is not a number"


@dataclass
class SubmissionError(WrSubmitError):
    """wr exited with a non-zero status."""
    command: str
    exit_code: int

    def __str__(self) -> str:
        return f'Error {self.exit_code} running "{self.command}"'


@dataclass
class PhaseError(WrSubmitError):
    """Any failure in one of the execute() phases, tagged with that phase."""
    phase: str
    error: Exception

    def __str__(self) -> str:
        return f"Error {self.phase} jobs: {self.error}"

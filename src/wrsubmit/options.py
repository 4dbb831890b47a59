# options.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator


class ExecutorOptions(BaseModel):
    """Run-wide options shared by all executors."""

    analysis_path: Path
    log_dir: Optional[Path] = None
    job_name_prefix: Optional[str] = None
    job_priority: Optional[int] = Field(default=None, ge=0, le=255)
    interactive: bool = False
    future_path_is_in_outgoing: bool = False
    wr_binary: str = "wr"

    @model_validator(mode="after")
    def _resolve_paths(self) -> "ExecutorOptions":
        # log file paths handed to wr must be absolute
        self.analysis_path = self.analysis_path.expanduser().resolve()
        if self.log_dir is None:
            self.log_dir = self.analysis_path / "log"
        else:
            self.log_dir = self.log_dir.expanduser().resolve()
        return self

    def has_job_name_prefix(self) -> bool:
        return bool(self.job_name_prefix)

    def has_job_priority(self) -> bool:
        return self.job_priority is not None


class OptionsBuilder:
    """
    Fluent construction of ExecutorOptions:

        options = (
            OptionsBuilder("/staging/run1")
            .with_prefix("run1")
            .with_priority(50)
            .interactive()
            .build()
        )
    """

    def __init__(self, analysis_path: str | Path):
        self._values: dict = {"analysis_path": analysis_path}

    def with_log_dir(self, log_dir: str | Path):
        self._values["log_dir"] = log_dir
        return self

    def with_prefix(self, prefix: str | None):
        self._values["job_name_prefix"] = prefix
        return self

    def with_priority(self, priority: int | None):
        self._values["job_priority"] = priority
        return self

    def interactive(self, enabled: bool = True):
        self._values["interactive"] = enabled
        return self

    def future_path_in_outgoing(self, enabled: bool = True):
        self._values["future_path_is_in_outgoing"] = enabled
        return self

    def with_wr_binary(self, binary: str):
        self._values["wr_binary"] = binary
        return self

    def build(self) -> ExecutorOptions:
        try:
            return ExecutorOptions(**self._values)
        except ValidationError as exc:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
            raise ValueError(f"Invalid executor options: {', '.join(fields)}") from exc

from __future__ import annotations

from typing import Dict, Type

from .base import Executor, ExecutionResult, run_executor
from .wr import WrExecutor

EXECUTORS: Dict[str, Type[Executor]] = {
    WrExecutor.executor_type: WrExecutor,
}


def executor_for(name: str) -> Type[Executor]:
    try:
        return EXECUTORS[name]
    except KeyError:
        raise ValueError(f"Unknown executor {name!r}, known: {sorted(EXECUTORS)}") from None


__all__ = ["Executor", "ExecutionResult", "WrExecutor", "EXECUTORS", "executor_for", "run_executor"]

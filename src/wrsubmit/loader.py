# loader.py
from __future__ import annotations

import json
import runpy
from pathlib import Path

from .dsl import Pipeline, definitions_from_records
from .dsl import pipeline as pipeline_helper
from .graph import FunctionGraph


def load_pipeline(path: str | Path) -> Pipeline:
    """
    Load a pipeline from a python file or a JSON file.

    A python file must define either:
      - pipeline() -> Pipeline
      - PIPELINE = Pipeline(...)

    A JSON file holds the function graph and the job definitions:
      {"graph": {"nodes": [...], "edges": [...]},
       "definitions": {"function": [{"identifier": ..., "command": ...}, ...]}}
    """
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Pipeline file not found: {p}")
    if p.suffix == ".json":
        return _load_json_pipeline(p)
    if p.suffix != ".py":
        raise ValueError(f"Pipeline must be a .py or .json file, got: {p.name}")

    module_name = f"wrsubmit_pipeline_{p.stem}"
    globals_dict = runpy.run_path(str(p), run_name=module_name)

    result = None
    factory = globals_dict.get("pipeline")
    if callable(factory) and factory is not pipeline_helper:
        result = factory()
    elif "PIPELINE" in globals_dict:
        result = globals_dict["PIPELINE"]

    if not isinstance(result, Pipeline):
        raise TypeError(
            "Pipeline file must return/define a Pipeline. "
            "Define pipeline() -> Pipeline or PIPELINE = Pipeline(...)."
        )
    return result


def _load_json_pipeline(path: Path) -> Pipeline:
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Pipeline JSON must be an object: {path}")

    graph = FunctionGraph.from_dict(data)
    graph.topological_sort()

    definitions = {}
    for name, records in (data.get("definitions") or {}).items():
        if name not in graph:
            raise ValueError(f"Definitions given for unknown function '{name}'")
        definitions[name] = definitions_from_records(records)
    return Pipeline(graph=graph, definitions=definitions)

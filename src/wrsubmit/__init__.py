from .dsl import definition, composition, function, pipeline, FunctionBuilder, build, Pipeline
from .executor import WrExecutor, run_executor
from .graph import FunctionGraph
from .model import JobDefinition, Composition, Component, WrJob
from .options import ExecutorOptions, OptionsBuilder

__all__ = [
    "definition", "composition", "function", "pipeline", "FunctionBuilder", "build", "Pipeline",
    "WrExecutor", "run_executor", "FunctionGraph",
    "JobDefinition", "Composition", "Component", "WrJob",
    "ExecutorOptions", "OptionsBuilder",
]

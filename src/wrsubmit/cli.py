# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from wrsubmit.executor import EXECUTORS, executor_for, run_executor
from wrsubmit.loader import load_pipeline
from wrsubmit.options import OptionsBuilder
from wrsubmit.ui.console import Console, get_console, set_console


def _load_or_exit(ctx, pipeline_path: str):
    console = get_console()
    try:
        return load_pipeline(pipeline_path)
    except Exception as e:
        console.print_error(
            "Failed to load pipeline",
            f"Could not load pipeline from {pipeline_path}",
            details=[str(e)],
            suggestion="A pipeline file defines pipeline() -> Pipeline, or is a JSON function graph.",
        )
        if ctx.obj.get("debug", False):
            console.print_exception(e)
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """wrsubmit — submit pipeline function graphs to the wr workflow runner."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--pipeline", "pipeline_path", required=True, help="Pipeline file (.py or .json)")
@click.option(
    "--analysis-path",
    required=True,
    type=click.Path(file_okay=False),
    help="Run analysis directory; the commands file is written here",
)
@click.option("--log-dir", default=None, type=click.Path(file_okay=False), help="Log directory (defaults to <analysis-path>/log)")
@click.option("--job-name-prefix", default=None, help="Prefix for wr report groups")
@click.option("--job-priority", default=None, type=click.IntRange(0, 255), help="wr job priority")
@click.option("--interactive", is_flag=True, default=False, help="Print the wr command instead of running it")
@click.option(
    "--future-path-is-in-outgoing",
    is_flag=True,
    default=False,
    help="Jobs run after the run folder has moved to outgoing",
)
@click.option("--wr-binary", default="wr", show_default=True, help="wr executable")
@click.option(
    "--executor",
    "executor_type",
    default="wr",
    show_default=True,
    type=click.Choice(sorted(EXECUTORS)),
    help="Executor to submit with",
)
@click.pass_context
def submit(
    ctx,
    pipeline_path,
    analysis_path,
    log_dir,
    job_name_prefix,
    job_priority,
    interactive,
    future_path_is_in_outgoing,
    wr_binary,
    executor_type,
):
    """Define, save and submit jobs for all functions of a pipeline."""
    console = get_console()
    pipeline = _load_or_exit(ctx, pipeline_path)

    builder = (
        OptionsBuilder(analysis_path)
        .with_prefix(job_name_prefix)
        .with_priority(job_priority)
        .interactive(interactive)
        .future_path_in_outgoing(future_path_is_in_outgoing)
        .with_wr_binary(wr_binary)
    )
    if log_dir:
        builder.with_log_dir(log_dir)
    try:
        options = builder.build()
    except ValueError as e:
        console.print_error("Invalid options", str(e))
        sys.exit(2)

    console.print_submission_started(
        pipeline=Path(pipeline_path).name,
        executor=executor_type,
        function_count=len(pipeline.graph),
        job_count=pipeline.job_count(),
    )

    executor = executor_for(executor_type)(pipeline.graph, pipeline.definitions, options)
    result = run_executor(executor)
    console.print_result(result.status, result.commands_file)
    if result.error is not None:
        console.print_exception(result.error)
        sys.exit(1)


@cli.command()
@click.option("--pipeline", "pipeline_path", required=True, help="Pipeline file (.py or .json)")
@click.pass_context
def plan(ctx, pipeline_path):
    """Print functions in submission order."""
    console = get_console()
    pipeline = _load_or_exit(ctx, pipeline_path)
    console.print_header("PLAN")
    for name in pipeline.graph.topological_sort():
        count = sum(1 for d in pipeline.definitions.get(name, []) if not d.excluded)
        console.print_plan_function(name, count, pipeline.graph.predecessors(name))


if __name__ == "__main__":
    cli()

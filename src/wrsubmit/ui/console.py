"""Console output formatting utilities for wrsubmit."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show debug lines and full stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_submission_started(
        self,
        pipeline: str,
        executor: str,
        function_count: int,
        job_count: int,
    ) -> None:
        """Print submission start information."""
        print("\nSUBMISSION STARTED")
        print(f"Pipeline: {pipeline}")
        print(f"Executor: {executor}")
        print(f"Functions: {function_count}")
        print(f"Jobs: {job_count}")
        print()

    def print_plan_function(self, name: str, job_count: int, upstream: list[str]) -> None:
        """Print one function of the submission plan."""
        after = f" after {', '.join(upstream)}" if upstream else ""
        print(f"  {name} ({job_count} job(s)){after}")

    def print_result(self, status: str, commands_file: Optional[str] = None) -> None:
        """Print final submission status."""
        print("\n" + "=" * 40)
        print(f"STATUS: {status.upper()}")
        if commands_file:
            print(f"Commands file: {commands_file}")
        print("=" * 40)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console

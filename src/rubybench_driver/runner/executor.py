import json
import logging
import math
import os
import shlex
import subprocess  # nosec B404 - benchmark scripts are external processes
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import click

from ..errors import BenchmarkExecutionError

logger = logging.getLogger(__name__)

# Output contract shared with every benchmark script
LABEL_FIELD = "label"
IPS_FIELD = "iterations_per_second"
OBJECTS_FIELD = "total_allocated_objects_per_iteration"


@dataclass(frozen=True)
class Invocation:
    """One benchmark command line: argv plus environment overrides."""

    argv: tuple[str, ...]
    env: dict[str, str] = field(default_factory=dict)

    def with_env(self, **extra: str) -> "Invocation":
        """Return a copy with ``extra`` placed ahead of the existing variables."""
        env = dict(extra)
        env.update((key, value) for key, value in self.env.items() if key not in extra)
        return Invocation(argv=self.argv, env=env)

    def describe(self) -> str:
        assignments = [f"{key}={shlex.quote(value)}" for key, value in self.env.items()]
        return " ".join([*assignments, *(shlex.quote(arg) for arg in self.argv)])


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class RunResult:
    label: str
    iterations_per_second: int | float
    total_allocated_objects_per_iteration: int | float

    @classmethod
    def from_output(cls, output: str) -> "RunResult | None":
        """Parse the single JSON object a benchmark prints.

        Returns None when the output is not a JSON object carrying the
        expected fields.
        """
        try:
            data = json.loads(output)
        except (json.JSONDecodeError, TypeError):
            return None
        if not isinstance(data, dict):
            return None

        label = data.get(LABEL_FIELD)
        ips = data.get(IPS_FIELD)
        objects = data.get(OBJECTS_FIELD)
        if not isinstance(label, str) or not _is_number(ips) or not _is_number(objects):
            return None
        return cls(
            label=label,
            iterations_per_second=ips,
            total_allocated_objects_per_iteration=objects,
        )

    def progress_line(self) -> str:
        return (
            f"{self.label} {self.iterations_per_second}/ips "
            f"{self.total_allocated_objects_per_iteration} objects allocated"
        )


Executor = Callable[[Invocation], RunResult | None]


def execute_once(invocation: Invocation) -> RunResult | None:
    """Run a benchmark process once and parse its result line.

    Raises:
        BenchmarkExecutionError: If the process cannot be started.
    """
    command = list(invocation.argv)
    logger.debug("Running %s", invocation.describe())
    try:
        result = subprocess.run(  # nosec B603
            command,
            env={**os.environ, **invocation.env},
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        cmd_name = command[0] if command else "benchmark"
        raise BenchmarkExecutionError(
            f"Failed to start {cmd_name}: {exc}", command=command
        ) from exc

    run_result = RunResult.from_output(result.stdout or "")
    if run_result is None:
        logger.debug(
            "No result from %s (exit %d): %r",
            invocation.describe(),
            result.returncode,
            (result.stdout or "")[:200],
        )
        return None

    click.echo(run_result.progress_line())
    return run_result


def select_best(
    invocation: Invocation,
    repeat_count: int = 1,
    execute: Executor = execute_once,
) -> RunResult | None:
    """Run ``invocation`` ``repeat_count`` times and keep the fastest run.

    Runs whose output cannot be parsed are dropped. Among equal throughputs
    the latest run wins.
    """
    if repeat_count < 1:
        raise ValueError(f"repeat_count must be >= 1, got {repeat_count}")

    results: list[RunResult] = []
    for _ in range(repeat_count):
        run_result = execute(invocation)
        if run_result is not None:
            results.append(run_result)

    if not results:
        return None
    # stable sort: last of equal maxima is the latest run
    return sorted(results, key=lambda r: r.iterations_per_second)[-1]

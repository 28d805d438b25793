import logging
from decimal import ROUND_HALF_UP, Context, Decimal
from pathlib import Path
from typing import Protocol

import click
import httpx

from .clients import FormData
from .config import DriverConfig
from .runner import PreparedPair, RunResult

logger = logging.getLogger(__name__)

IPS_RESULT_TYPE = {
    "benchmark_result_type[name]": "Number of iterations per second",
    "benchmark_result_type[unit]": "Iterations per second",
}
OBJECTS_RESULT_TYPE = {
    "benchmark_result_type[name]": "Allocated objects",
    "benchmark_result_type[unit]": "Objects",
}

IPS_PRECISION = Decimal("0.001")

POSTING_MESSAGE = "Posting results to Web UI...."


class Submitter(Protocol):
    def submit(self, form: FormData) -> httpx.Response: ...


def _round_ips(value: int | float) -> int | float:
    if isinstance(value, int):
        return value
    # half-up on the shortest decimal form: 5.0005 -> 5.001
    exact = Decimal(repr(value))
    context = Context(prec=max(28, exact.adjusted() + 4))
    return float(exact.quantize(IPS_PRECISION, rounding=ROUND_HALF_UP, context=context))


def build_base_payload(
    config: DriverConfig, result: RunResult, path: Path, digest: str
) -> FormData:
    """Classification fields shared by every submission of one measurement."""
    data: FormData = {
        "benchmark_type[category]": result.label,
        "benchmark_type[script_url]": f"{config.script_base_url}{Path(path).name}",
        "benchmark_type[digest]": digest,
        "benchmark_run[environment]": config.runtime_version,
        "repo": config.repo,
        "organization": config.organization,
    }
    if config.commit_hash:
        data["commit_hash"] = config.commit_hash
    elif config.version:
        data["version"] = config.version
    return data


class ResultReporter:
    def __init__(self, client: Submitter) -> None:
        self._client = client

    def _submit(self, base: FormData, results: FormData) -> None:
        self._client.submit({**base, **results})

    def report_single(self, base: FormData, result: RunResult) -> None:
        self._submit(
            base,
            {
                "benchmark_run[result][iterations_per_second]": _round_ips(
                    result.iterations_per_second
                ),
                **IPS_RESULT_TYPE,
            },
        )
        self._submit(
            base,
            {
                "benchmark_run[result][total_allocated_objects_per_iteration]": (
                    result.total_allocated_objects_per_iteration
                ),
                **OBJECTS_RESULT_TYPE,
            },
        )
        self._posted(base)

    def report_prepared_pair(self, base: FormData, pair: PreparedPair) -> None:
        with_ps = pair.with_prepared_statements
        without_ps = pair.without_prepared_statements
        self._submit(
            base,
            {
                "benchmark_run[result][with_prepared_statements]": _round_ips(
                    with_ps.iterations_per_second
                ),
                "benchmark_run[result][without_prepared_statements]": _round_ips(
                    without_ps.iterations_per_second
                ),
                **IPS_RESULT_TYPE,
            },
        )
        self._submit(
            base,
            {
                "benchmark_run[result][with_prepared_statements]": (
                    with_ps.total_allocated_objects_per_iteration
                ),
                "benchmark_run[result][without_prepared_statements]": (
                    without_ps.total_allocated_objects_per_iteration
                ),
                **OBJECTS_RESULT_TYPE,
            },
        )
        self._posted(base)

    def _posted(self, base: FormData) -> None:
        logger.info(
            "Reported %s (%s)", base["benchmark_type[category]"], base["benchmark_type[script_url]"]
        )
        click.echo(POSTING_MESSAGE)

import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from .clients import ResultsClient
from .config import DriverConfig
from .driver import BenchmarkDriver
from .errors import ConfigError, DiscoveryError

logger = logging.getLogger(__name__)


def _split_patterns(value: str | None) -> list[str]:
    if not value:
        return []
    return [part for part in value.split(",") if part]


def _configure_logging(verbose: bool) -> None:
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_str = os.getenv("BENCH_LOG_LEVEL", "WARNING").upper()
        log_level = getattr(logging, log_level_str, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )


@click.command()
@click.option(
    "--repeat-count",
    "-r",
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="Run benchmarks NUM times taking the best result",
)
@click.option(
    "--pattern",
    "-p",
    default="",
    help="Benchmark name patterns, comma separated (default: all benchmarks)",
)
@click.option(
    "--directory",
    "-d",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory containing bm_* benchmark scripts",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(repeat_count: int, pattern: str, directory: Path, verbose: bool) -> None:
    """Run Rails benchmarks and post the best results to rubybench.org."""
    # Load .env from current directory or parents
    load_dotenv()
    _configure_logging(verbose)

    try:
        config = DriverConfig.from_env()
    except ConfigError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    patterns = _split_patterns(pattern)
    logger.info(
        "Running benchmarks in %s (repeat_count=%d, patterns=%s)",
        directory,
        repeat_count,
        patterns or "all",
    )

    with ResultsClient(config) as client:
        driver = BenchmarkDriver(
            config,
            client,
            directory=directory,
            repeat_count=repeat_count,
            patterns=patterns,
        )
        try:
            driver.run()
        except DiscoveryError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)


if __name__ == "__main__":
    main()

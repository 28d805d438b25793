import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config import Backend
from .executor import Executor, Invocation, RunResult, execute_once, select_best

logger = logging.getLogger(__name__)

# Benchmarks that talk to a database are run once per backend
DATA_LAYER_PATTERN = re.compile(r"activerecord|scaffold")

PRODUCTION_ENV = {"RAILS_ENV": "production"}


def is_data_layer(path: Path | str) -> bool:
    return DATA_LAYER_PATTERN.search(str(path)) is not None


def base_invocation(path: Path, runtime: str) -> Invocation:
    return Invocation(argv=(runtime, str(path)), env=dict(PRODUCTION_ENV))


def prepared_invocation(base: Invocation, backend: Backend, prepared: bool) -> Invocation:
    return base.with_env(DATABASE_URL=backend.connection_url(prepared))


@dataclass(frozen=True)
class SingleRun:
    invocation: Invocation


@dataclass(frozen=True)
class BackendMatrix:
    base: Invocation
    backends: tuple[Backend, ...]

    def pairs(self) -> Iterator[tuple[Backend, Invocation, Invocation]]:
        for backend in self.backends:
            yield (
                backend,
                prepared_invocation(self.base, backend, True),
                prepared_invocation(self.base, backend, False),
            )


def expand(path: Path, backends: Sequence[Backend], runtime: str) -> SingleRun | BackendMatrix:
    base = base_invocation(path, runtime)
    if is_data_layer(path):
        return BackendMatrix(base=base, backends=tuple(backends))
    return SingleRun(invocation=base)


@dataclass(frozen=True)
class PreparedPair:
    with_prepared_statements: RunResult
    without_prepared_statements: RunResult


def measure_prepared_pair(
    with_prepared: Invocation,
    without_prepared: Invocation,
    repeat_count: int = 1,
    execute: Executor = execute_once,
) -> PreparedPair | None:
    """Measure both prepared-statement variants; None unless both produce a result.

    The unprepared variant is not run when the prepared one yields nothing.
    """
    with_result = select_best(with_prepared, repeat_count, execute)
    if with_result is None:
        logger.debug("No result with prepared statements: %s", with_prepared.describe())
        return None

    without_result = select_best(without_prepared, repeat_count, execute)
    if without_result is None:
        logger.debug("No result without prepared statements: %s", without_prepared.describe())
        return None

    return PreparedPair(
        with_prepared_statements=with_result,
        without_prepared_statements=without_result,
    )

import logging
from collections.abc import Sequence
from pathlib import Path

from .config import Backend, DriverConfig
from .digest import DigestComputer
from .discovery import discover
from .reporter import ResultReporter, Submitter, build_base_payload
from .runner import (
    BackendMatrix,
    Executor,
    Invocation,
    execute_once,
    expand,
    measure_prepared_pair,
    select_best,
)

logger = logging.getLogger(__name__)


class BenchmarkDriver:
    """Runs every selected benchmark and reports its best result.

    Benchmarks, backends and repetitions are processed strictly one after
    another so that no two measured processes overlap.
    """

    def __init__(
        self,
        config: DriverConfig,
        client: Submitter,
        *,
        directory: str | Path,
        repeat_count: int = 1,
        patterns: Sequence[str] = (),
        execute: Executor = execute_once,
    ):
        if repeat_count < 1:
            raise ValueError(f"repeat_count must be >= 1, got {repeat_count}")
        self.config = config
        self.directory = Path(directory)
        self.repeat_count = repeat_count
        self.patterns = list(patterns)
        self._execute = execute
        self._digests = DigestComputer(config)
        self._reporter = ResultReporter(client)

    def run(self) -> int:
        """Measure and report all matching benchmarks.

        Returns:
            Number of measurements reported (one per benchmark, or one per
            backend for data-layer benchmarks).
        """
        reported = 0
        for path in discover(self.directory, self.patterns):
            reported += self.run_file(path)
        logger.info("Reported %d measurement(s)", reported)
        return reported

    def run_file(self, path: Path) -> int:
        plan = expand(path, self.config.backends, self.config.runtime)
        if isinstance(plan, BackendMatrix):
            reported = 0
            for backend, with_ps, without_ps in plan.pairs():
                if self._measure_backend(path, backend, with_ps, without_ps):
                    reported += 1
            return reported
        return 1 if self._measure_single(path, plan.invocation) else 0

    def _measure_single(self, path: Path, invocation: Invocation) -> bool:
        result = select_best(invocation, self.repeat_count, self._execute)
        if result is None:
            logger.debug("Skipping %s: no parsable result", path.name)
            return False
        digest = self._digests.compute(path)
        base = build_base_payload(self.config, result, path, digest)
        self._reporter.report_single(base, result)
        return True

    def _measure_backend(
        self,
        path: Path,
        backend: Backend,
        with_ps: Invocation,
        without_ps: Invocation,
    ) -> bool:
        pair = measure_prepared_pair(with_ps, without_ps, self.repeat_count, self._execute)
        if pair is None:
            logger.debug(
                "Skipping %s on %s: incomplete prepared statements pair", path.name, backend.name
            )
            return False
        digest = self._digests.compute(path, backend)
        base = build_base_payload(self.config, pair.with_prepared_statements, path, digest)
        self._reporter.report_prepared_pair(base, pair)
        return True

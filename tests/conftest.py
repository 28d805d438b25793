import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from rubybench_driver.config import DriverConfig
from rubybench_driver.runner import Invocation, RunResult

FAKE_RUBY_VERSION = "ruby 3.3.0 (2023-12-25 revision 5124f9ac75) [x86_64-linux]\n"


def benchmark_output(label: str = "bench", ips: float = 10.0, objects: int = 100) -> str:
    return json.dumps(
        {
            "label": label,
            "iterations_per_second": ips,
            "total_allocated_objects_per_iteration": objects,
        }
    )


class FakeExecutor:
    """Stands in for execute_once, replaying queued outcomes in call order."""

    def __init__(self, outcomes: Iterable[RunResult | None] = (), default: Any = None) -> None:
        self.outcomes = list(outcomes)
        self.default = default
        self.calls: list[Invocation] = []

    def __call__(self, invocation: Invocation) -> RunResult | None:
        self.calls.append(invocation)
        if self.outcomes:
            return self.outcomes.pop(0)
        if callable(self.default):
            return self.default(invocation)
        return self.default


@pytest.fixture
def make_output():
    return benchmark_output


@pytest.fixture
def make_executor():
    return FakeExecutor


@pytest.fixture
def driver_config() -> DriverConfig:
    return DriverConfig(
        runtime_version=FAKE_RUBY_VERSION,
        api_host="bench.example.org",
        api_name="bench-bot",
        api_password="s3cret",
        backend_versions={"psql": "16.2", "mysql": "8.0.36"},
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in [
        "API_URL",
        "API_NAME",
        "API_PASSWORD",
        "RAILS_COMMIT_HASH",
        "RAILS_VERSION",
        "POSTGRES_ENV_PG_VERSION",
        "MYSQL_ENV_MYSQL_VERSION",
        "BENCH_RUNTIME",
        "BENCH_API_TIMEOUT",
        "BENCH_LOG_LEVEL",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def bench_dir(tmp_path: Path) -> Path:
    """A benchmark directory with plain, data-layer and non-benchmark entries."""
    root = tmp_path / "benchmarks"
    root.mkdir()
    for name in [
        "bm_request.rb",
        "bm_activerecord_create.rb",
        "bm_scaffold_index.rb",
        "driver.rb",
        "helper.rb",
    ]:
        (root / name).write_text(f"# {name}\nputs 'hi'\n")
    (root / "bm_subdir").mkdir()
    return root


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.submit.return_value = MagicMock(status_code=201)
    return client

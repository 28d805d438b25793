from pathlib import Path
from unittest.mock import MagicMock

import pytest

from rubybench_driver.config import DriverConfig
from rubybench_driver.digest import DigestComputer
from rubybench_driver.driver import BenchmarkDriver
from rubybench_driver.errors import DiscoveryError
from rubybench_driver.runner import Invocation, RunResult


def _ok(invocation: Invocation) -> RunResult:
    return RunResult(
        label=Path(invocation.argv[-1]).stem,
        iterations_per_second=10.0,
        total_allocated_objects_per_iteration=5,
    )


def _forms(client: MagicMock) -> list[dict]:
    return [c.args[0] for c in client.submit.call_args_list]


class TestBenchmarkDriver:
    def test_plain_benchmark_reports_two_payloads(
        self, bench_dir: Path, driver_config: DriverConfig, mock_client: MagicMock, make_executor
    ) -> None:
        execute = make_executor(default=_ok)
        driver = BenchmarkDriver(
            driver_config, mock_client, directory=bench_dir, patterns=["request"], execute=execute
        )

        assert driver.run() == 1
        assert len(execute.calls) == 1
        assert execute.calls[0].env == {"RAILS_ENV": "production"}

        forms = _forms(mock_client)
        assert len(forms) == 2
        digest = DigestComputer(driver_config).compute(bench_dir / "bm_request.rb")
        assert {f["benchmark_type[digest]"] for f in forms} == {digest}

    def test_repeat_count_multiplies_runs(
        self, bench_dir: Path, driver_config: DriverConfig, mock_client: MagicMock, make_executor
    ) -> None:
        execute = make_executor(default=_ok)
        driver = BenchmarkDriver(
            driver_config,
            mock_client,
            directory=bench_dir,
            repeat_count=3,
            patterns=["request"],
            execute=execute,
        )
        driver.run()
        assert len(execute.calls) == 3

    def test_data_layer_benchmark_runs_backend_matrix(
        self, bench_dir: Path, driver_config: DriverConfig, mock_client: MagicMock, make_executor
    ) -> None:
        execute = make_executor(default=_ok)
        driver = BenchmarkDriver(
            driver_config,
            mock_client,
            directory=bench_dir,
            patterns=["activerecord"],
            execute=execute,
        )

        assert driver.run() == 2
        assert len(execute.calls) == len(driver_config.backends) * 2
        urls = [inv.env["DATABASE_URL"] for inv in execute.calls]
        assert urls == [
            "postgres://postgres@postgres:5432/rubybench?prepared_statements=true",
            "postgres://postgres@postgres:5432/rubybench?prepared_statements=false",
            "mysql2://root@mysql:3306/rubybench?prepared_statements=true",
            "mysql2://root@mysql:3306/rubybench?prepared_statements=false",
        ]

        forms = _forms(mock_client)
        assert len(forms) == 4
        assert all("benchmark_run[result][with_prepared_statements]" in f for f in forms)
        psql_digest, mysql_digest = (
            forms[0]["benchmark_type[digest]"],
            forms[2]["benchmark_type[digest]"],
        )
        assert psql_digest != mysql_digest
        assert forms[1]["benchmark_type[digest]"] == psql_digest

    def test_unprepared_failure_submits_nothing_for_backend(
        self, bench_dir: Path, driver_config: DriverConfig, mock_client: MagicMock, make_executor
    ) -> None:
        def prepared_only(invocation: Invocation) -> RunResult | None:
            if invocation.env["DATABASE_URL"].endswith("prepared_statements=false"):
                return None
            return _ok(invocation)

        execute = make_executor(default=prepared_only)
        driver = BenchmarkDriver(
            driver_config,
            mock_client,
            directory=bench_dir,
            patterns=["scaffold"],
            execute=execute,
        )

        assert driver.run() == 0
        mock_client.submit.assert_not_called()

    def test_all_runs_failing_is_silent(
        self,
        bench_dir: Path,
        driver_config: DriverConfig,
        mock_client: MagicMock,
        make_executor,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        execute = make_executor(default=None)
        driver = BenchmarkDriver(
            driver_config, mock_client, directory=bench_dir, repeat_count=2, execute=execute
        )

        assert driver.run() == 0
        mock_client.submit.assert_not_called()
        assert capsys.readouterr().out == ""

    def test_processes_files_in_discovery_order(
        self, bench_dir: Path, driver_config: DriverConfig, mock_client: MagicMock, make_executor
    ) -> None:
        execute = make_executor(default=_ok)
        BenchmarkDriver(driver_config, mock_client, directory=bench_dir, execute=execute).run()

        scripts = [Path(inv.argv[-1]).name for inv in execute.calls]
        assert scripts == ["bm_activerecord_create.rb"] * 4 + ["bm_request.rb"] + [
            "bm_scaffold_index.rb"
        ] * 4
        assert mock_client.submit.call_count == 10

    def test_missing_directory_is_fatal(
        self, tmp_path: Path, driver_config: DriverConfig, mock_client: MagicMock
    ) -> None:
        driver = BenchmarkDriver(driver_config, mock_client, directory=tmp_path / "nope")
        with pytest.raises(DiscoveryError):
            driver.run()

    def test_rejects_zero_repeat_count(
        self, tmp_path: Path, driver_config: DriverConfig, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValueError):
            BenchmarkDriver(driver_config, mock_client, directory=tmp_path, repeat_count=0)

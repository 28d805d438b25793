import logging
import os
import subprocess  # nosec B404 - runtime version probe
from dataclasses import dataclass, field

from ..errors import ConfigError
from .backends import DEFAULT_BACKENDS, Backend

logger = logging.getLogger(__name__)

__all__ = [
    "API_PORT",
    "BENCHMARK_RUNS_PATH",
    "DEFAULT_API_HOST",
    "DriverConfig",
    "SCRIPT_BASE_URL",
]

# Results service (rubybench.org web UI)
DEFAULT_API_HOST = "rubybench.org"
API_PORT = 443
BENCHMARK_RUNS_PATH = "/benchmark_runs"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Scripts are referenced by their raw URL in the benchmark suite repository
SCRIPT_BASE_URL = (
    "https://raw.githubusercontent.com/ruby-bench/ruby-bench-suite/master/rails/benchmarks/"
)

DEFAULT_RUNTIME = "ruby"
DEFAULT_REPO = "rails"
DEFAULT_ORGANIZATION = "rails"

RUNTIME_VERSION_TIMEOUT_SECONDS = 30


def detect_runtime_version(runtime: str) -> str:
    """Return the raw output of ``<runtime> -v``.

    The trailing newline is kept: the string is hashed into digests and must
    stay identical to what earlier drivers submitted.
    """
    try:
        result = subprocess.run(  # nosec B603 B607
            [runtime, "-v"],
            capture_output=True,
            text=True,
            check=False,
            timeout=RUNTIME_VERSION_TIMEOUT_SECONDS,
        )
    except subprocess.TimeoutExpired as exc:
        raise ConfigError(f"{runtime} -v timed out after {exc.timeout}s") from exc
    except OSError as exc:
        raise ConfigError(f"Benchmark runtime '{runtime}' not found: {exc}") from exc

    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip() or "unknown error"
        raise ConfigError(f"{runtime} -v failed (exit {result.returncode}): {detail}")
    return result.stdout


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
        if timeout <= 0:
            raise ValueError("timeout must be positive")
    except ValueError:
        logger.warning(
            "Invalid BENCH_API_TIMEOUT=%r, using default %.1fs", raw, DEFAULT_TIMEOUT_SECONDS
        )
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


@dataclass(frozen=True)
class DriverConfig:
    runtime_version: str
    api_host: str = DEFAULT_API_HOST
    api_name: str | None = None
    api_password: str | None = None
    commit_hash: str | None = None
    version: str | None = None
    backend_versions: dict[str, str] = field(default_factory=dict)
    backends: tuple[Backend, ...] = DEFAULT_BACKENDS
    runtime: str = DEFAULT_RUNTIME
    script_base_url: str = SCRIPT_BASE_URL
    repo: str = DEFAULT_REPO
    organization: str = DEFAULT_ORGANIZATION
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def base_url(self) -> str:
        return f"https://{self.api_host}:{API_PORT}"

    def backend_version(self, backend: Backend) -> str:
        return self.backend_versions.get(backend.name, "")

    @classmethod
    def from_env(cls) -> "DriverConfig":
        runtime = os.getenv("BENCH_RUNTIME", "").strip() or DEFAULT_RUNTIME
        runtime_version = detect_runtime_version(runtime)

        api_name = os.getenv("API_NAME") or None
        api_password = os.getenv("API_PASSWORD") or None
        if not (api_name and api_password):
            logger.warning(
                "API_NAME / API_PASSWORD not set; the results service will reject submissions"
            )

        backend_versions: dict[str, str] = {}
        for backend in DEFAULT_BACKENDS:
            value = os.getenv(backend.version_env)
            if value:
                backend_versions[backend.name] = value

        return cls(
            runtime_version=runtime_version,
            api_host=os.getenv("API_URL") or DEFAULT_API_HOST,
            api_name=api_name,
            api_password=api_password,
            commit_hash=os.getenv("RAILS_COMMIT_HASH") or None,
            version=os.getenv("RAILS_VERSION") or None,
            backend_versions=backend_versions,
            runtime=runtime,
            timeout=_parse_timeout(os.getenv("BENCH_API_TIMEOUT")),
        )

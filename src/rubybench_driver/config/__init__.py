from .backends import DEFAULT_BACKENDS, Backend
from .settings import (
    API_PORT,
    BENCHMARK_RUNS_PATH,
    DEFAULT_API_HOST,
    SCRIPT_BASE_URL,
    DriverConfig,
    detect_runtime_version,
)

__all__ = [
    "API_PORT",
    "BENCHMARK_RUNS_PATH",
    "DEFAULT_API_HOST",
    "DEFAULT_BACKENDS",
    "SCRIPT_BASE_URL",
    "Backend",
    "DriverConfig",
    "detect_runtime_version",
]

__version__ = "0.1.0"

from .clients import ResultsClient
from .config import Backend, DriverConfig
from .digest import DigestComputer
from .discovery import discover
from .driver import BenchmarkDriver
from .reporter import ResultReporter
from .runner import RunResult, execute_once, select_best

__all__ = [
    "__version__",
    "Backend",
    "BenchmarkDriver",
    "DigestComputer",
    "DriverConfig",
    "ResultReporter",
    "ResultsClient",
    "RunResult",
    "discover",
    "execute_once",
    "select_best",
]

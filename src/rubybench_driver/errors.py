class DriverError(RuntimeError):
    """Base class for fatal benchmark driver errors."""


class ConfigError(DriverError):
    """Environment or runtime configuration is unusable."""


class DiscoveryError(DriverError):
    """Benchmark directory cannot be enumerated."""


class BenchmarkExecutionError(DriverError):
    """A benchmark process could not be spawned at all.

    Malformed benchmark output is not an error; it yields no result.
    """

    def __init__(self, message: str, *, command: list[str] | None = None):
        super().__init__(message)
        self.command = command or []


class SubmissionError(DriverError):
    """Transport-level failure while posting results."""

import hashlib
from pathlib import Path

from .config import Backend, DriverConfig


class DigestComputer:
    """Computes the identity hash the results service uses to group runs.

    The digest covers the script source, the runtime version and, for
    data-layer benchmarks, the version of the database backend.
    """

    def __init__(self, config: DriverConfig) -> None:
        self._config = config

    def compute(self, path: Path, backend: Backend | None = None) -> str:
        sha256 = hashlib.sha256()
        sha256.update(Path(path).read_bytes())
        sha256.update(self._config.runtime_version.encode("utf-8"))
        if backend is not None:
            sha256.update(self._config.backend_version(backend).encode("utf-8"))
        return sha256.hexdigest()

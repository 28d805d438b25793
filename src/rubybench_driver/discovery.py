import logging
import re
from collections.abc import Iterable
from pathlib import Path

from .errors import DiscoveryError

logger = logging.getLogger(__name__)

BENCHMARK_PREFIX = "bm_"


def _is_benchmark_name(name: str) -> bool:
    return name.startswith(BENCHMARK_PREFIX) and len(name) > len(BENCHMARK_PREFIX)


def compile_patterns(patterns: Iterable[str]) -> re.Pattern[str] | None:
    """Compile name patterns into one alternation; None when there are none.

    Raises:
        DiscoveryError: If a pattern is not a valid regular expression.
    """
    active = [p for p in patterns if p]
    if not active:
        return None
    for pattern in active:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise DiscoveryError(f"Invalid benchmark name pattern {pattern!r}: {exc}") from exc
    return re.compile("|".join(active))


def matches_patterns(name: str, patterns: Iterable[str]) -> bool:
    """Return True if ``name`` matches any of ``patterns`` (regex search).

    An empty pattern list matches everything.
    """
    compiled = compile_patterns(patterns)
    return compiled is None or compiled.search(name) is not None


def discover(directory: str | Path, patterns: Iterable[str] = ()) -> list[Path]:
    """List benchmark scripts directly under ``directory``.

    Args:
        directory: Directory holding ``bm_*`` scripts. Not searched recursively.
        patterns: Optional name patterns; a script is kept when any matches
            its basename.

    Returns:
        Matching script paths sorted by name.

    Raises:
        DiscoveryError: If ``directory`` does not exist or cannot be listed, or
            a pattern is not a valid regular expression.
    """
    root = Path(directory)
    if not root.is_dir():
        raise DiscoveryError(f"Benchmark directory does not exist: {root}")

    compiled = compile_patterns(patterns)
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise DiscoveryError(f"Cannot list benchmark directory {root}: {exc}") from exc

    files = [
        path
        for path in entries
        if path.is_file()
        and _is_benchmark_name(path.name)
        and (compiled is None or compiled.search(path.name) is not None)
    ]
    logger.debug("Discovered %d benchmark(s) in %s", len(files), root)
    return files

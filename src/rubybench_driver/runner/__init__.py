from .executor import Executor, Invocation, RunResult, execute_once, select_best
from .matrix import (
    BackendMatrix,
    PreparedPair,
    SingleRun,
    expand,
    is_data_layer,
    measure_prepared_pair,
)

__all__ = [
    "BackendMatrix",
    "Executor",
    "Invocation",
    "PreparedPair",
    "RunResult",
    "SingleRun",
    "execute_once",
    "expand",
    "is_data_layer",
    "measure_prepared_pair",
    "select_best",
]

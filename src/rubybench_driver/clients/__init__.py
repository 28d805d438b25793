from .results import FormData, ResultsClient

__all__ = ["FormData", "ResultsClient"]

import logging
import types
from typing import Any

import httpx

from ..config import BENCHMARK_RUNS_PATH, DriverConfig
from ..errors import SubmissionError

logger = logging.getLogger(__name__)

FormData = dict[str, Any]


class ResultsClient:
    """Posts benchmark runs to the results web UI.

    A single connection is reused for all submissions of a driver run.
    Responses are returned as-is; the service's answer is not checked.
    """

    def __init__(self, config: DriverConfig, transport: httpx.BaseTransport | None = None) -> None:
        self._config = config
        auth = None
        if config.api_name is not None or config.api_password is not None:
            auth = httpx.BasicAuth(config.api_name or "", config.api_password or "")
        self._client = httpx.Client(
            base_url=config.base_url,
            auth=auth,
            timeout=config.timeout,
            transport=transport,
        )

    def submit(self, form: FormData) -> httpx.Response:
        data = {key: str(value) for key, value in form.items()}
        try:
            resp = self._client.post(BENCHMARK_RUNS_PATH, data=data)
        except httpx.HTTPError as exc:
            raise SubmissionError(
                f"Failed to post results to {self._config.base_url}: {exc}"
            ) from exc
        logger.debug(
            "Posted %s (status=%d)", data.get("benchmark_type[category]"), resp.status_code
        )
        return resp

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ResultsClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.close()

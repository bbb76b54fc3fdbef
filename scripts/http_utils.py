import logging
import random
import time
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import requests

LOGGER = logging.getLogger("yt_site")
T = TypeVar("T")

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient(err: BaseException) -> bool:
    if isinstance(err, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(err, requests.HTTPError):
        status = getattr(err.response, "status_code", None)
        return status in RETRY_STATUSES
    return False


def run_with_retries(
    operation: Callable[[], T],
    *,
    retries: int,
    backoff_seconds: float,
    max_backoff_seconds: float = 30.0,
    jitter_ratio: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run a blocking operation, retrying transient HTTP failures with backoff.

    Only connection errors, timeouts and 429/5xx responses are retried; any
    other error is raised immediately.
    """

    attempt = 0
    delay_seconds = backoff_seconds
    while True:
        try:
            return operation()
        except requests.RequestException as err:
            if not is_transient(err):
                raise
            attempt += 1
            if attempt > retries:
                LOGGER.error("Retries exhausted after %s attempts: %s", attempt, err)
                raise
            LOGGER.warning("Retrying after error (%s/%s): %s", attempt, retries, err)

            jitter_amount = delay_seconds * jitter_ratio
            sleep_for = delay_seconds + (
                random.uniform(-jitter_amount, jitter_amount) if jitter_amount else 0
            )
            sleep(max(sleep_for, 0))
            delay_seconds = min(delay_seconds * 2, max_backoff_seconds)


def get_response(
    session: requests.Session,
    url: str,
    params: Optional[Mapping[str, Any]] = None,
    *,
    timeout: float,
    retries: int = 0,
    backoff_seconds: float = 2.0,
) -> requests.Response:
    def _do() -> requests.Response:
        response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response

    return run_with_retries(_do, retries=retries, backoff_seconds=backoff_seconds)


def get_json(
    session: requests.Session,
    url: str,
    params: Optional[Mapping[str, Any]] = None,
    *,
    timeout: float,
    retries: int = 0,
    backoff_seconds: float = 2.0,
) -> Dict[str, Any]:
    response = get_response(
        session,
        url,
        params,
        timeout=timeout,
        retries=retries,
        backoff_seconds=backoff_seconds,
    )
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected JSON payload from {url}: {type(data).__name__}")
    return data

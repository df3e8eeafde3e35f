from __future__ import annotations

import logging
from typing import Iterable, Type

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from .config import settings

logger = logging.getLogger(__name__)


def net_retry(
    max_attempts: int | None = None,
    *,
    initial: float | None = None,
    maximum: float | None = None,
    retry_on: Iterable[Type[BaseException]] | None = None,
):
    """Retry decorator tuned for network I/O.

    Only transport-level failures are retried by default; HTTP status and
    parse errors surface on the first attempt. Defaults come from settings:
    RETRY_MAX_ATTEMPTS, RETRY_INITIAL_DELAY, RETRY_MAX_DELAY.
    """
    attempts = int(max_attempts or settings.retry_max_attempts)
    init = float(initial or settings.retry_initial_delay)
    mx = float(maximum or settings.retry_max_delay)
    cond = retry_if_exception_type(tuple(retry_on) if retry_on else httpx.TransportError)
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=init, max=mx) + wait_random(0, init),
        retry=cond,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )

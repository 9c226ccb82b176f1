"""HTTP client with retry/backoff."""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Dict, Optional

import requests

from . import config

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


class HttpClient:
    def __init__(
        self,
        timeout: Optional[int] = None,
        retry_max: Optional[int] = None,
        backoff_base: float = config.HTTP_BACKOFF_BASE,
        backoff_max: float = config.HTTP_BACKOFF_MAX,
    ) -> None:
        self.timeout = config.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.retry_max = max(1, config.HTTP_RETRY_MAX if retry_max is None else retry_max)
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.session = requests.Session()

    def get_json(
        self,
        url: str,
        params: Dict[str, Any],
        extra_headers: Optional[Dict[str, str]] = None,
        retry_max: Optional[int] = None,
    ) -> Dict[str, Any]:
        attempts = self.retry_max if retry_max is None else max(1, retry_max)
        headers = {"Accept": "application/json"}
        if extra_headers:
            headers.update(extra_headers)

        for attempt in range(1, attempts + 1):
            try:
                resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            except requests.RequestException:
                if attempt >= attempts:
                    raise
                logger.warning("Request to %s failed (attempt %s)", url, attempt)
                self._sleep_backoff(attempt)
                continue

            status = resp.status_code
            if status == 200:
                try:
                    return resp.json()
                except ValueError:
                    logger.error("Non-JSON response from %s", url)
                    raise

            if status in RETRYABLE_STATUSES:
                logger.warning("HTTP %s from %s (attempt %s)", status, url, attempt)
                if attempt >= attempts:
                    resp.raise_for_status()
                if not self._sleep_retry_after(resp):
                    self._sleep_backoff(attempt)
                continue

            # Non-retryable
            logger.error("HTTP %s from %s", status, url)
            resp.raise_for_status()

        raise RuntimeError("Unexpected HTTP retry loop exit")

    def _sleep_backoff(self, attempt: int) -> None:
        base = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        jitter = random.uniform(0, self.backoff_base)
        time.sleep(base + jitter)

    def _sleep_retry_after(self, resp: requests.Response) -> bool:
        retry_after = resp.headers.get("Retry-After")
        if not retry_after:
            return False
        try:
            delay = float(retry_after)
        except ValueError:
            return False
        delay = max(0.0, min(delay, self.backoff_max))
        time.sleep(delay)
        return True

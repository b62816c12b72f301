"""
Shared HTTP client.

Provides a pre-configured ``requests.Session`` with a default timeout and
User-Agent. Every call is a single attempt: the mounted adapter never
retries, and failures are reported to the caller as-is. All datasource
modules should use this instead of bare ``requests.get``.

Usage::

    from city_forecast.services.http import session

    resp = session.get("https://api.openweathermap.org/data/2.5/weather", params=...)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: One attempt per call - no retries on connect, read or status errors.
NO_RETRY = Retry(
    total=0,
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 10  # seconds

USER_AGENT = "city-forecast/0.1"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Wrap send to inject a default timeout so callers don't need to
    # remember to pass ``timeout=`` every time.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session - import and use directly.
session: requests.Session = create_session()

from __future__ import annotations

import httpx

from .config import settings
from .errors import SourceError
from .retry import net_retry

USER_AGENT = "rankradar/1 fetch"


def async_http_client(
    timeout: float | None = None,
    verify: bool | None = None,
    max_connections: int = 10,
    max_keepalive: int = 5,
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient that follows redirects, with limits for our workloads."""
    limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_keepalive)
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else settings.http_timeout,
        verify=settings.http_verify_tls if verify is None else verify,
        limits=limits,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


@net_retry()
async def fetch(client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    """GET `url`; any non-2xx final status becomes a SourceError."""
    r = await client.get(url, **kwargs)
    if not r.is_success:
        raise SourceError(f"download failed: HTTP {r.status_code} for {url}")
    return r

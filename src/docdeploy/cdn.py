# cdn.py
from __future__ import annotations

from typing import Optional, Protocol, Sequence

import httpx

from .errors import CDNError


class CDNConnector(Protocol):
    async def purge(self, job_id: str, urls: Sequence[str]) -> None: ...

    async def purge_all(self, job_id: str) -> None: ...


class FastlyConnector:
    """
    Fastly purge client.

    `purge` sends a PURGE for each URL and then GETs it so the edge is warm
    again before users hit it. `purge_all` empties the whole service.
    """

    def __init__(
        self,
        service_id: str,
        token: str,
        api_url: str = "https://api.fastly.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_id = service_id
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Fastly-Key": self.token, "Accept": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def purge(self, job_id: str, urls: Sequence[str]) -> None:
        async with self._client() as client:
            for url in urls:
                try:
                    resp = await client.request("PURGE", url)
                    resp.raise_for_status()
                    warm = await client.get(url)
                    warm.raise_for_status()
                except httpx.HTTPError as e:
                    raise CDNError(f"[{job_id}] purge failed for {url}: {e}") from e

    async def purge_all(self, job_id: str) -> None:
        url = f"{self.api_url}/service/{self.service_id}/purge_all"
        async with self._client() as client:
            try:
                resp = await client.post(url)
                resp.raise_for_status()
            except httpx.HTTPError as e:
                raise CDNError(f"[{job_id}] purge_all failed for service {self.service_id}: {e}") from e

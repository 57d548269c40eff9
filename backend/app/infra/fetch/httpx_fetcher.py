from __future__ import annotations

import httpx

from app.core.errors import UpstreamError
from app.infra.ports.fetch import DocumentFetchPort


class HttpxDocumentFetcher(DocumentFetchPort):
    provider_name = "httpx"

    def __init__(self, *, timeout_seconds: int = 10, transport: httpx.BaseTransport | None = None):
        self.timeout_seconds = max(1, int(timeout_seconds))
        self._transport = transport

    def fetch(self, url: str) -> str:
        try:
            with httpx.Client(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = client.get(url)
                resp.raise_for_status()
        # InvalidURL is not an HTTPError; over-long host labels fail IDNA encoding.
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
            raise UpstreamError(f"Failed to fetch {url}: {exc}") from exc
        return resp.text

# vns_core/fetch/fetch_http.py
from __future__ import annotations
from typing import Iterator
import requests
from vns_core.fetch.fetch_base import (
    BaseFetcher, DEFAULT_CHUNK, FetchError, FetchNotFoundError, FetchUnavailableError,
)
from vns_core.logger import get_logger
from vns_core.utils import content_path

log = get_logger("VNS.Fetch.HTTP")


class HTTPGatewayFetcher(BaseFetcher):
    """
    Resolves content links through an IPFS HTTP gateway:

        ipfs://<cid>[/path]  ->  GET {base_url}/ipfs/<cid>[/path]
    """
    name = "http"

    def __init__(self, base_url: str = "http://127.0.0.1:8080", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def url_for(self, link: str) -> str:
        path = content_path(link)
        if not path:
            raise FetchError(f"link has no content path: {link!r}")
        return f"{self.base_url}/ipfs/{path}"

    def stream(self, link: str, chunk_size: int = DEFAULT_CHUNK) -> Iterator[bytes]:
        url = self.url_for(link)
        log.info(f"[HTTP GET] → {url}")
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as res:
                if res.status_code == 404:
                    raise FetchNotFoundError(f"content not found: {link}")
                if not res.ok:
                    log.error(f"[HTTP GET] {res.status_code}: {res.reason}")
                    raise FetchError(f"gateway returned {res.status_code} for {link}")
                for chunk in res.iter_content(chunk_size=chunk_size):
                    if chunk:
                        yield chunk
        except (requests.ConnectionError, requests.Timeout, requests.exceptions.ChunkedEncodingError) as e:
            log.error(f"[HTTP GET] gateway unreachable: {e}")
            raise FetchUnavailableError(f"gateway {self.base_url} unreachable: {e}") from e
        except requests.RequestException as e:
            log.error(f"[HTTP GET] request failed: {e}")
            raise FetchError(f"gateway request for {link} failed: {e}") from e

    def close(self) -> None:
        self.session.close()

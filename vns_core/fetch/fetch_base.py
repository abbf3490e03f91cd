from __future__ import annotations
from typing import Iterator

DEFAULT_CHUNK = 64 * 1024


class FetchError(Exception):
    pass


class FetchNotFoundError(FetchError):
    pass


class FetchUnavailableError(FetchError):
    pass


class BaseFetcher:
    """
    Content-fetch contract: a link in, content bytes out. The fetcher never
    interprets the content.
    """
    name: str = "base"

    def stream(self, link: str, chunk_size: int = DEFAULT_CHUNK) -> Iterator[bytes]:
        raise NotImplementedError

    def fetch(self, link: str) -> bytes:
        return b"".join(self.stream(link))

    def close(self) -> None:
        return

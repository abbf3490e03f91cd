# vns_core/fetch/fetch_local.py
from __future__ import annotations
from pathlib import Path
from typing import Iterator
from vns_core.fetch.fetch_base import BaseFetcher, DEFAULT_CHUNK, FetchError, FetchNotFoundError
from vns_core.logger import get_logger
from vns_core.utils import content_path

log = get_logger("VNS.Fetch.Local")


class LocalFetcher(BaseFetcher):
    """Serves content from a directory laid out as ``<root>/<cid>[/path]``."""
    name = "local"

    def __init__(self, root: str = "content"):
        self.root = Path(root)

    def path_for(self, link: str) -> Path:
        path = content_path(link)
        parts = Path(path).parts
        if not path or ".." in parts:
            raise FetchError(f"invalid content link: {link!r}")
        return self.root.joinpath(*parts)

    def stream(self, link: str, chunk_size: int = DEFAULT_CHUNK) -> Iterator[bytes]:
        target = self.path_for(link)
        log.debug(f"[LOCAL GET] {link} -> {target}")
        try:
            f = open(target, "rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise FetchNotFoundError(f"content not found: {link}") from e
        with f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                yield chunk

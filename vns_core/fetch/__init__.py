# vns_core/fetch/__init__.py
from __future__ import annotations
from vns_core.config import StoreConfig, load_config
from vns_core.fetch.fetch_base import (
    BaseFetcher, FetchError, FetchNotFoundError, FetchUnavailableError,
)
from vns_core.fetch.fetch_http import HTTPGatewayFetcher
from vns_core.fetch.fetch_local import LocalFetcher


def fetcher_factory(config: StoreConfig | None = None) -> BaseFetcher:
    """
    fetch_provider:
      - "http"  → IPFS HTTP gateway at gateway_url
      - "local" → files under content_dir
    """
    config = config or load_config()

    if config.fetch_provider == "local":
        return LocalFetcher(config.content_dir)

    if config.fetch_provider == "http":
        return HTTPGatewayFetcher(config.gateway_url, timeout=config.fetch_timeout)

    raise ValueError(f"Unknown fetch provider: {config.fetch_provider}")


__all__ = [
    "BaseFetcher",
    "FetchError",
    "FetchNotFoundError",
    "FetchUnavailableError",
    "HTTPGatewayFetcher",
    "LocalFetcher",
    "fetcher_factory",
]

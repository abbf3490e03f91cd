"""
vns_core.config
---------------
Explicit configuration for the record store. Nothing here is global: a
``StoreConfig`` is built once and handed to ``RecordStore``.

Resolution order per field: explicit overrides dict, then ``VNS_*``
environment variables, then defaults.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import os
from .logger import is_log_level

MATCH_MODES = ("exact", "substring")
COMPACTION_MODES = ("atomic", "in_place")
TABLE_PROVIDERS = ("flatfile", "memory")
FETCH_PROVIDERS = ("http", "local")

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class StoreConfig:
    storage_path: str = "storage.txt"
    table_provider: str = "flatfile"
    match_mode: str = "exact"
    compaction: str = "atomic"
    locking: bool = True
    fetch_provider: str = "http"
    gateway_url: str = "http://127.0.0.1:8080"
    content_dir: str = "content"
    fetch_timeout: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        _check_choice("table_provider", self.table_provider, TABLE_PROVIDERS)
        _check_choice("match_mode", self.match_mode, MATCH_MODES)
        _check_choice("compaction", self.compaction, COMPACTION_MODES)
        _check_choice("fetch_provider", self.fetch_provider, FETCH_PROVIDERS)
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")
        if not is_log_level(self.log_level):
            raise ValueError(f"Unknown log_level: {self.log_level!r}")


def _check_choice(field_name: str, value: str, allowed) -> None:
    if value not in allowed:
        raise ValueError(f"Unknown {field_name}: {value!r} (expected one of {', '.join(allowed)})")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE


def load_config(overrides: Optional[Dict[str, Any]] = None) -> StoreConfig:
    """
    Build a StoreConfig from overrides + environment.

    Example:
        cfg = load_config({"storage_path": "/var/lib/vns/storage.txt"})
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    def pick(key: str, env: str, default, cast=str):
        if key in overrides:
            return overrides[key]
        raw = os.getenv(env)
        if raw is None or raw == "":
            return default
        return cast(raw)

    defaults = StoreConfig()
    return StoreConfig(
        storage_path=pick("storage_path", "VNS_STORAGE_PATH", defaults.storage_path),
        table_provider=pick("table_provider", "VNS_TABLE_PROVIDER", defaults.table_provider).lower(),
        match_mode=pick("match_mode", "VNS_MATCH_MODE", defaults.match_mode).lower(),
        compaction=pick("compaction", "VNS_COMPACTION", defaults.compaction).lower(),
        locking=pick("locking", "VNS_LOCKING", defaults.locking, _env_bool),
        fetch_provider=pick("fetch_provider", "VNS_FETCH_PROVIDER", defaults.fetch_provider).lower(),
        gateway_url=pick("gateway_url", "VNS_GATEWAY_URL", defaults.gateway_url),
        content_dir=pick("content_dir", "VNS_CONTENT_DIR", defaults.content_dir),
        fetch_timeout=float(pick("fetch_timeout", "VNS_FETCH_TIMEOUT", defaults.fetch_timeout, float)),
        log_level=pick("log_level", "VNS_LOG_LEVEL", defaults.log_level).upper(),
    )

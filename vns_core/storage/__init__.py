# vns_core/storage/__init__.py
from __future__ import annotations

from .models import Record
from .lines import line_skip, line_span
from .provider import RecordTable, identifier_matches
from .providers.memory_provider import InMemoryTable
from .providers.flatfile_provider import FlatFileTable
from vns_core.config import StoreConfig, load_config


def load_table_provider(config: StoreConfig | None = None) -> RecordTable:
    """
    Factory resolver for the record table backend.

        - flatfile (default)
        - memory
    """
    config = config or load_config()

    if config.table_provider == "memory":
        return InMemoryTable(match_mode=config.match_mode)

    if config.table_provider == "flatfile":
        return FlatFileTable(
            config.storage_path,
            match_mode=config.match_mode,
            compaction=config.compaction,
            locking=config.locking,
        )
    raise ValueError(f"Unknown table provider: {config.table_provider}")


__all__ = [
    "Record",
    "RecordTable",
    "FlatFileTable",
    "InMemoryTable",
    "identifier_matches",
    "line_skip",
    "line_span",
    "load_table_provider",
]

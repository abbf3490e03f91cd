"""
vns_core.store
--------------
RecordStore: the verified name-record store.

    set(identifier, link, signature)
        canonicalize -> decode key -> verify(link) -> replace stale line | append
    get(identifier) -> link
    resolve(identifier) -> content bytes via the fetch adapter

A bad signature is rejected before any table I/O: the table file is not
created, opened or locked. Writers must be serialized; the flat-file table
does this with an advisory lock when ``locking`` is on.
"""

from __future__ import annotations
from typing import Iterator, List, Optional
from .config import StoreConfig, load_config
from .crypto import verify_signature
from .errors import InvalidLinkError, RecordNotFoundError, SignatureInvalidError
from .fetch import BaseFetcher, fetcher_factory
from .identifier import Identifier
from .logger import get_logger
from .storage import Record, RecordTable, load_table_provider
from .utils import is_storable_link

log = get_logger("VNS.Store")


class RecordStore:
    def __init__(self, config: Optional[StoreConfig] = None,
                 table: Optional[RecordTable] = None,
                 fetcher: Optional[BaseFetcher] = None):
        self.config = config or load_config()
        self.table = table if table is not None else load_table_provider(self.config)
        self._fetcher = fetcher

    @property
    def fetcher(self) -> BaseFetcher:
        if self._fetcher is None:
            self._fetcher = fetcher_factory(self.config)
        return self._fetcher

    def set(self, identifier: str, link: str, signature: bytes) -> Record:
        ident = Identifier.parse(identifier)
        uid = str(ident)
        if not is_storable_link(link):
            raise InvalidLinkError("link must be non-empty and contain no tab or line break")

        if not verify_signature(ident.key(), link.encode("utf-8"), signature):
            log.warning(f"[SET] signature rejected uid={uid}")
            raise SignatureInvalidError(f"signature does not verify for {ident.name}")

        record = Record(identifier=uid, link=link)
        with self.table.lock():
            self.table.ensure()
            found, line_index = self.table.find_by_identifier(uid)
            if found:
                self.table.replace_line(line_index, record)
            else:
                self.table.append(record)

        log.info(f"[SET] uid={uid} link={link} replaced={found}")
        return record

    def get(self, identifier: str) -> str:
        uid = str(Identifier.parse(identifier))
        if not self.table.exists():
            raise RecordNotFoundError(f"no record for {uid} (table absent)")
        rec = self.table.lookup(uid)
        if rec is None:
            log.info(f"[GET] miss uid={uid}")
            raise RecordNotFoundError(f"no record for {uid}")
        log.info(f"[GET] uid={uid} link={rec.link}")
        return rec.link

    def resolve(self, identifier: str) -> bytes:
        return self.fetcher.fetch(self.get(identifier))

    def stream(self, identifier: str) -> Iterator[bytes]:
        return self.fetcher.stream(self.get(identifier))

    def records(self) -> List[Record]:
        if not self.table.exists():
            return []
        return self.table.list_records()

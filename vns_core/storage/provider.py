# vns_core/storage/provider.py
from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple
from vns_core.errors import CorruptLineError
from vns_core.logger import get_logger
from vns_core.storage.models import Record

log = get_logger("VNS.Table")

MATCH_EXACT = "exact"
MATCH_SUBSTRING = "substring"


def identifier_matches(stored: str, query: str, mode: str = MATCH_EXACT) -> bool:
    """
    Both arguments are canonical identifier strings.

    ``substring`` reproduces the legacy containment test: a query matches
    any stored identifier that contains it, e.g. ``bob:ab12`` matches
    ``bob:ab12ff``. Only exact mode guarantees one record per identifier.
    """
    if mode == MATCH_SUBSTRING:
        return query in stored
    return stored == query


class RecordTable:
    """
    Record table interface. Providers supply raw line iteration plus the
    mutations; replace and lookup are shared.
    """
    match_mode: str = MATCH_EXACT

    # Interface
    def exists(self) -> bool: ...
    def ensure(self) -> None: ...
    def iter_lines(self) -> Iterator[str]: ...
    def delete_line(self, line_index: int) -> None: ...
    def append(self, record: Record) -> None: ...

    def replace_line(self, line_index: int, record: Record) -> None:
        self.delete_line(line_index)
        self.append(record)

    @contextmanager
    def lock(self):
        yield

    # Shared lookup
    def iter_records(self) -> Iterator[Tuple[int, Record]]:
        try:
            for line_no, line in enumerate(self.iter_lines(), start=1):
                yield line_no, Record.from_line(line, line_no)
        except CorruptLineError as e:
            log.error(f"[TABLE] {e}")
            raise

    def find_by_identifier(self, identifier: str) -> Tuple[bool, int]:
        """
        Returns (True, 1-based line index) of the first match, or
        (False, number of lines scanned).
        """
        scanned = 0
        for line_no, rec in self.iter_records():
            if identifier_matches(rec.identifier, identifier, self.match_mode):
                return True, line_no
            scanned = line_no
        return False, scanned

    def lookup(self, identifier: str) -> Optional[Record]:
        for _, rec in self.iter_records():
            if identifier_matches(rec.identifier, identifier, self.match_mode):
                return rec
        return None

    def list_records(self) -> List[Record]:
        return [rec for _, rec in self.iter_records()]

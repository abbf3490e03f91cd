from typing import Iterator, List, Optional
from vns_core.storage.models import Record
from vns_core.storage.provider import RecordTable, MATCH_EXACT


class InMemoryTable(RecordTable):
    """Record table kept as a list of lines; same line semantics as the file table."""

    def __init__(self, match_mode=MATCH_EXACT, lines: Optional[List[str]] = None):
        self.match_mode = match_mode
        self.lines = list(lines) if lines is not None else None

    def exists(self) -> bool:
        return self.lines is not None

    def ensure(self) -> None:
        if self.lines is None:
            self.lines = []

    def iter_lines(self) -> Iterator[str]:
        return iter(list(self.lines or []))

    def delete_line(self, line_index: int) -> None:
        if not self.lines or not 1 <= line_index <= len(self.lines):
            raise IndexError(f"line {line_index} is past the end of the table")
        del self.lines[line_index - 1]

    def append(self, record: Record) -> None:
        self.ensure()
        self.lines.append(record.to_line())

# vns_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass
from vns_core.errors import CorruptLineError, MalformedIdentifierError
from vns_core.identifier import Identifier
from vns_core.utils import is_storable_link

FIELD_SEP = "\t"
LINE_END = "\n"


@dataclass
class Record:
    """
    One binding of identifier -> link, stored as a single table line:

        <name>:<lowercase-hex-pubkey><TAB><link><LF>
    """
    identifier: str
    link: str

    def to_line(self) -> str:
        return f"{self.identifier}{FIELD_SEP}{self.link}{LINE_END}"

    def to_bytes(self) -> bytes:
        return self.to_line().encode("utf-8")

    @classmethod
    def from_line(cls, line: str, line_no: int) -> "Record":
        body = line[:-1] if line.endswith(LINE_END) else line
        uid, sep, link = body.partition(FIELD_SEP)
        if not sep:
            raise CorruptLineError(line_no, "missing tab between identifier and link", line)
        if not is_storable_link(link):
            raise CorruptLineError(line_no, "link is empty or contains control characters", line)
        try:
            parsed = Identifier.parse(uid, validate_key=False)
        except MalformedIdentifierError as e:
            raise CorruptLineError(line_no, str(e), line) from e
        return cls(identifier=str(parsed), link=link)

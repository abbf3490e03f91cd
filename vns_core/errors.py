from __future__ import annotations
from typing import Optional


class RecordStoreError(Exception):
    pass


class MalformedIdentifierError(RecordStoreError):
    pass


class InvalidPublicKeyEncodingError(MalformedIdentifierError):
    pass


class SignatureInvalidError(RecordStoreError):
    pass


class StorageUnavailableError(RecordStoreError):
    pass


class RecordNotFoundError(RecordStoreError):
    pass


class InvalidLinkError(RecordStoreError):
    pass


class CorruptLineError(RecordStoreError):
    """A stored line did not split or decode as ``name:hexkey<TAB>link``."""

    def __init__(self, line_no: int, reason: str, line: Optional[str] = None):
        self.line_no = line_no
        self.reason = reason
        self.line = line
        super().__init__(f"corrupt record at line {line_no}: {reason}")

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
import fcntl, os, stat
from vns_core.errors import CorruptLineError, StorageUnavailableError
from vns_core.logger import get_logger
from vns_core.storage.lines import line_span
from vns_core.storage.models import Record
from vns_core.storage.provider import RecordTable, MATCH_EXACT

log = get_logger("VNS.Table")

COMPACT_ATOMIC = "atomic"
COMPACT_IN_PLACE = "in_place"


class FlatFileTable(RecordTable):
    """
    Newline-delimited record table on the local filesystem.

    Writers must be serialized; with ``locking`` on, ``lock()`` takes an
    advisory exclusive flock on ``<path>.lock``. In ``in_place`` compaction
    a crash between truncate and tail rewrite loses the tail of the file;
    ``atomic`` compaction writes a temp file and renames it over the table.
    """

    def __init__(self, path="storage.txt", match_mode=MATCH_EXACT,
                 compaction=COMPACT_ATOMIC, locking=True):
        self.path = path
        self.match_mode = match_mode
        self.compaction = compaction
        self.locking = locking

    @property
    def lock_path(self) -> str:
        return self.path + ".lock"

    def exists(self) -> bool:
        return os.path.exists(self.path)

    @property
    def dir_path(self) -> str:
        return os.path.dirname(self.path) or "."

    def _ensure_dir(self) -> None:
        try:
            os.makedirs(self.dir_path, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"cannot create directory {self.dir_path}: {e}") from e

    def ensure(self) -> None:
        """Create the table file (and its directory) if missing."""
        self._ensure_dir()
        try:
            if not os.path.exists(self.path):
                open(self.path, "ab").close()
                log.info(f"[TABLE] created {self.path}")
        except OSError as e:
            raise StorageUnavailableError(f"cannot create table {self.path}: {e}") from e

    @contextmanager
    def lock(self):
        if not self.locking:
            yield
            return
        self._ensure_dir()
        try:
            lf = open(self.lock_path, "a")
        except OSError as e:
            raise StorageUnavailableError(f"cannot open lock file {self.lock_path}: {e}") from e
        with lf:
            fcntl.flock(lf, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lf, fcntl.LOCK_UN)

    def _read_bytes(self) -> bytes:
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except OSError as e:
            raise StorageUnavailableError(f"cannot read table {self.path}: {e}") from e

    def iter_lines(self) -> Iterator[str]:
        try:
            f = open(self.path, "rb")
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageUnavailableError(f"cannot open table {self.path}: {e}") from e
        with f:
            for line_no, raw in enumerate(f, start=1):
                try:
                    yield raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise CorruptLineError(line_no, "line is not valid UTF-8") from e

    def delete_line(self, line_index: int) -> None:
        """
        Remove exactly one line (1-based). The table shrinks by the byte
        length of that line including its newline; every other line keeps
        its bytes and order.
        """
        data = self._read_bytes()
        start, end = line_span(data, line_index)
        tail = data[end:]
        try:
            if self.compaction == COMPACT_IN_PLACE:
                self._compact_in_place(start, tail)
            else:
                self._atomic_write(data[:start] + tail)
        except OSError as e:
            raise StorageUnavailableError(f"cannot rewrite table {self.path}: {e}") from e
        log.debug(f"[TABLE] deleted line {line_index} ({end - start} bytes) mode={self.compaction}")

    def replace_line(self, line_index: int, record: Record) -> None:
        """
        Drop line ``line_index`` and add ``record`` as the last line. In
        ``atomic`` mode both happen in one rename, so a failure leaves the
        old table untouched.
        """
        if self.compaction == COMPACT_IN_PLACE:
            super().replace_line(line_index, record)
            return
        data = self._read_bytes()
        start, end = line_span(data, line_index)
        rest = data[:start] + data[end:]
        if rest and not rest.endswith(b"\n"):
            rest += b"\n"
        try:
            self._atomic_write(rest + record.to_bytes())
        except OSError as e:
            raise StorageUnavailableError(f"cannot rewrite table {self.path}: {e}") from e
        log.debug(f"[TABLE] replaced line {line_index} mode={self.compaction}")

    def _compact_in_place(self, start: int, tail: bytes) -> None:
        with open(self.path, "r+b") as f:
            f.truncate(start)
            if tail:
                f.seek(start)
                f.write(tail)
            f.flush()
            os.fsync(f.fileno())

    def _atomic_write(self, data: bytes) -> None:
        tmp = self.path + ".tmp"
        try:
            mode = stat.S_IMODE(os.stat(self.path).st_mode)
            with open(tmp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, mode)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        self._fsync_dir()

    def _fsync_dir(self) -> None:
        fd = os.open(self.dir_path, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)

    def append(self, record: Record) -> None:
        line = record.to_bytes()
        try:
            with open(self.path, "ab+") as f:
                # never glue the new record onto an unterminated last line
                if f.seek(0, os.SEEK_END) > 0:
                    f.seek(-1, os.SEEK_END)
                    if f.read(1) != b"\n":
                        line = b"\n" + line
                f.write(line)
                f.flush()
        except OSError as e:
            raise StorageUnavailableError(f"cannot append to table {self.path}: {e}") from e

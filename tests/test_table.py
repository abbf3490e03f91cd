import pytest
from vns_core.crypto import generate_keypair, make_identifier
from vns_core.errors import CorruptLineError
from vns_core.storage import (
    FlatFileTable, InMemoryTable, Record, identifier_matches, line_skip, line_span,
)


def _uid(name):
    _, pub = generate_keypair()
    return make_identifier(name, pub)


@pytest.fixture
def abc_records():
    return [Record(_uid(n), f"ipfs://{n}") for n in ("a", "b", "c")]


def _write(path, records):
    path.write_bytes(b"".join(r.to_bytes() for r in records))


def test_line_skip():
    data = b"one\ntwo\nthree"
    assert line_skip(data, 0) == data
    assert line_skip(data, 1) == b"two\nthree"
    assert line_skip(data, 2) == b"three"
    assert line_skip(data, 3) == b""
    assert line_skip(data, 10) == b""
    assert line_skip(b"", 1) == b""


def test_line_span():
    data = b"one\ntwo\nthree"
    assert line_span(data, 1) == (0, 4)
    assert line_span(data, 2) == (4, 8)
    assert line_span(data, 3) == (8, 13)
    with pytest.raises(IndexError):
        line_span(data, 4)
    with pytest.raises(IndexError):
        line_span(data, 0)


def test_identifier_matches_modes():
    assert identifier_matches("bob:ab12", "bob:ab12")
    assert not identifier_matches("bob:ab12ff", "bob:ab12")
    assert identifier_matches("bob:ab12ff", "bob:ab12", "substring")


@pytest.mark.parametrize("compaction", ["atomic", "in_place"])
def test_delete_middle_line_keeps_neighbours(tmp_path, abc_records, compaction):
    path = tmp_path / "storage.txt"
    _write(path, abc_records)
    before = path.read_bytes()
    a, b, c = abc_records

    table = FlatFileTable(str(path), compaction=compaction)
    found, idx = table.find_by_identifier(b.identifier)
    assert (found, idx) == (True, 2)
    table.delete_line(idx)

    after = path.read_bytes()
    assert after == a.to_bytes() + c.to_bytes()
    assert len(after) == len(before) - len(b.to_bytes())


@pytest.mark.parametrize("compaction", ["atomic", "in_place"])
def test_delete_last_unterminated_line(tmp_path, abc_records, compaction):
    path = tmp_path / "storage.txt"
    a, b, _ = abc_records
    path.write_bytes(a.to_bytes() + b.to_line().rstrip("\n").encode())
    FlatFileTable(str(path), compaction=compaction).delete_line(2)
    assert path.read_bytes() == a.to_bytes()


def test_find_absent_returns_scanned_count(tmp_path, abc_records):
    path = tmp_path / "storage.txt"
    _write(path, abc_records)
    table = FlatFileTable(str(path))
    assert table.find_by_identifier(_uid("zed")) == (False, 3)


def test_append_is_last_and_keeps_previous_lines(tmp_path, abc_records):
    path = tmp_path / "storage.txt"
    a, b, c = abc_records
    path.write_bytes(a.to_bytes() + b.to_line().rstrip("\n").encode())
    table = FlatFileTable(str(path))
    table.append(c)
    assert path.read_bytes() == a.to_bytes() + b.to_bytes() + c.to_bytes()
    assert [r.link for r in table.list_records()] == ["ipfs://a", "ipfs://b", "ipfs://c"]


@pytest.mark.parametrize("line, reason", [
    (b"alice:abcd no tab\n", "missing tab"),
    (b"alice:xyz\tipfs://Qm\n", "not hex"),
    (b"nocolon\tipfs://Qm\n", "separator"),
    (b"alice:abcd\t\n", "link"),
    (b"\n", "missing tab"),
])
def test_corrupt_line_is_surfaced(tmp_path, abc_records, line, reason):
    path = tmp_path / "storage.txt"
    path.write_bytes(abc_records[0].to_bytes() + line)
    table = FlatFileTable(str(path))
    with pytest.raises(CorruptLineError) as exc:
        table.find_by_identifier(_uid("zed"))
    assert exc.value.line_no == 2
    assert reason in str(exc.value)


def test_invalid_utf8_line_is_corrupt(tmp_path):
    path = tmp_path / "storage.txt"
    path.write_bytes(b"\xff\xfe\tipfs://Qm\n")
    with pytest.raises(CorruptLineError):
        FlatFileTable(str(path)).list_records()


def test_ensure_creates_table_and_directory(tmp_path):
    path = tmp_path / "nested" / "storage.txt"
    table = FlatFileTable(str(path))
    assert not table.exists()
    table.ensure()
    assert table.exists()
    assert path.read_bytes() == b""


def test_lock_creates_lock_file(tmp_path):
    table = FlatFileTable(str(tmp_path / "storage.txt"))
    with table.lock():
        assert (tmp_path / "storage.txt.lock").exists()


def test_memory_table_matches_file_semantics(abc_records):
    table = InMemoryTable()
    assert not table.exists()
    for rec in abc_records:
        table.append(rec)
    found, idx = table.find_by_identifier(abc_records[1].identifier)
    table.delete_line(idx)
    assert table.lines == [abc_records[0].to_line(), abc_records[2].to_line()]
    with pytest.raises(IndexError):
        table.delete_line(5)


@pytest.mark.parametrize("compaction", ["atomic", "in_place"])
def test_replace_line_moves_record_last(tmp_path, abc_records, compaction):
    path = tmp_path / "storage.txt"
    _write(path, abc_records)
    a, b, c = abc_records
    new_b = Record(b.identifier, "ipfs://b2")

    FlatFileTable(str(path), compaction=compaction).replace_line(2, new_b)
    assert path.read_bytes() == a.to_bytes() + c.to_bytes() + new_b.to_bytes()


def test_replace_line_terminates_unterminated_tail(tmp_path, abc_records):
    path = tmp_path / "storage.txt"
    a, b, c = abc_records
    path.write_bytes(a.to_bytes() + b.to_bytes() + c.to_line().rstrip("\n").encode())
    FlatFileTable(str(path)).replace_line(1, a)
    assert path.read_bytes() == b.to_bytes() + c.to_bytes() + a.to_bytes()


def test_atomic_rewrite_keeps_file_mode(tmp_path, abc_records):
    path = tmp_path / "storage.txt"
    _write(path, abc_records)
    path.chmod(0o640)
    FlatFileTable(str(path)).delete_line(1)
    assert path.stat().st_mode & 0o777 == 0o640
    assert not (tmp_path / "storage.txt.tmp").exists()


def test_lock_creates_missing_directory(tmp_path):
    table = FlatFileTable(str(tmp_path / "nested" / "storage.txt"))
    with table.lock():
        assert (tmp_path / "nested" / "storage.txt.lock").exists()


def test_corrupt_line_is_logged(tmp_path, caplog):
    path = tmp_path / "storage.txt"
    path.write_bytes(b"garbage\n")
    with pytest.raises(CorruptLineError):
        FlatFileTable(str(path)).list_records()
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert errors and "corrupt record at line 1" in errors[0].getMessage()

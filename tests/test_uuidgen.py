import re

import pytest

from pixelminer.logger import LoggedError
from pixelminer.uuidgen import generate_uuid, load_or_create_uuid

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_generate_format():
    uuid = generate_uuid()
    assert len(uuid) == 36
    assert UUID_PATTERN.match(uuid)


def test_generate_is_random():
    values = {generate_uuid() for _ in range(20)}
    assert len(values) == 20
    assert all(UUID_PATTERN.match(value) for value in values)


def test_create_then_reload(tmp_path):
    path = tmp_path / "uuid.bin"
    created = load_or_create_uuid(path)
    data = path.read_bytes()
    assert len(data) == 37
    assert data[-1:] == b"\0"
    assert data[:-1].decode("ascii") == created
    assert load_or_create_uuid(path) == created


def test_reads_up_to_nul(tmp_path):
    path = tmp_path / "uuid.bin"
    path.write_bytes(b"abc\0rest")
    assert load_or_create_uuid(path) == "abc"


def test_unwritable_location_raises(tmp_path):
    with pytest.raises(LoggedError, match="ERROR"):
        load_or_create_uuid(tmp_path / "missing_dir" / "uuid.bin")
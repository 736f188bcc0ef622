import pytest

from pixelminer.packet import (
    BINARY_MODE,
    FileDescriptor,
    Packet,
    PacketAddress,
    PacketError,
    validate_path,
)


def test_string_wire_format():
    assert Packet().write_string("ACK").to_bytes() == b"\x00\x00\x00\x03ACK"


def test_integers_are_big_endian():
    data = Packet().write_uint16(0x0102).write_int32(-1).to_bytes()
    assert data == b"\x01\x02\xff\xff\xff\xff"


@pytest.mark.parametrize(
    "writer, reader, value",
    [
        ("write_uint8", "read_uint8", 200),
        ("write_uint16", "read_uint16", 65535),
        ("write_int32", "read_int32", -123456),
        ("write_uint64", "read_uint64", 2**64 - 1),
        ("write_string", "read_string", "ASK+UUID"),
        ("write_string", "read_string", ""),
    ],
)
def test_round_trip(writer, reader, value):
    packet = Packet()
    getattr(packet, writer)(value)
    copy = Packet.from_bytes(packet.to_bytes())
    assert getattr(copy, reader)() == value
    assert copy.at_end


def test_sequence_round_trip():
    packet = Packet().write_string("FILE").write_string("uuid").write_uint8(7)
    assert packet.read_string() == "FILE"
    assert packet.read_string() == "uuid"
    assert packet.read_uint8() == 7


def test_read_past_end_raises_and_keeps_position():
    packet = Packet(b"\x05")
    with pytest.raises(PacketError):
        packet.read_uint16()
    assert packet.read_uint8() == 5


def test_truncated_string_raises():
    packet = Packet().write_uint16(0).write_uint16(10)
    with pytest.raises(PacketError):
        packet.read_string()
    assert packet.remaining == 4


@pytest.mark.parametrize("value", [-1, 256])
def test_out_of_range_uint8(value):
    with pytest.raises(PacketError):
        Packet().write_uint8(value)


def test_read_rest_and_clear():
    packet = Packet().write_uint8(1).write_bytes(b"abc")
    packet.read_uint8()
    assert packet.read_rest() == b"abc"
    assert packet.at_end
    packet.clear()
    assert len(packet) == 0


def test_file_descriptor_from_path(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"hello")
    descriptor = FileDescriptor.from_path(path, BINARY_MODE)
    assert descriptor.filename == "data.bin"
    assert descriptor.filesize == len(b"hello")
    assert descriptor.mode == BINARY_MODE
    assert (descriptor.part, descriptor.total_parts) == (1, 1)


def test_file_descriptor_round_trip():
    descriptor = FileDescriptor("map.json", 1234, 8, 2, 3)
    packet = descriptor.write_to(Packet())
    packet.write_bytes(b"payload")
    assert FileDescriptor.read_from(packet) == descriptor
    assert packet.read_rest() == b"payload"


def test_file_descriptor_from_missing_path(tmp_path):
    with pytest.raises(OSError):
        FileDescriptor.from_path(tmp_path / "missing")


def test_validate_path(tmp_path):
    assert validate_path(tmp_path)
    assert not validate_path(tmp_path / "missing")


def test_packet_address_defaults():
    address = PacketAddress()
    assert (address.ip, address.port) == ("0.0.0.0", 0)
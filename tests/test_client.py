import io
import socket
import time

import pytest

from pixelminer.client import Client
from pixelminer.logger import LoggedError, Logger
from pixelminer.packet import FileDescriptor, Packet, PacketAddress


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def client(tmp_path, log_stream):
    with Client(
        "client-uuid",
        files_folder=str(tmp_path / "in"),
        poll_interval=0.02,
        logger=Logger("Client", log_stream),
    ) as cli:
        yield cli


@pytest.fixture
def fake_server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def _handshake(client, fake_server, reply="ACK", timeout=2.0):
    port = fake_server.getsockname()[1]
    thread = client.connect("127.0.0.1", port, timeout)
    data, address = fake_server.recvfrom(65536)
    fake_server.sendto(Packet().write_string(reply).to_bytes(), address)
    thread.join(2.0)
    return Packet(data), address


def test_connect_sends_identifier_and_accepts_ack(client, fake_server):
    request, _ = _handshake(client, fake_server)
    assert request.read_string() == "ASK+UUID"
    assert request.read_string() == "client-uuid"
    assert client.connected and client.ready
    assert client.server == PacketAddress("127.0.0.1", fake_server.getsockname()[1])


def test_rcn_also_connects(client, fake_server):
    _handshake(client, fake_server, "RCN")
    assert client.connected


@pytest.mark.parametrize("reply", ["RFS", "XYZ"])
def test_refusal_or_bad_response_leaves_disconnected(client, fake_server, reply):
    _handshake(client, fake_server, reply)
    assert not client.connected
    assert client.ready


def test_connect_timeout(client, fake_server):
    thread = client.connect("127.0.0.1", fake_server.getsockname()[1], 0.1)
    thread.join(2.0)
    assert not client.connected
    assert client.ready
    assert "Connection timeout" in client.logger.stream.getvalue()


def test_connect_while_connected_is_reported(client, fake_server, log_stream):
    _handshake(client, fake_server)
    assert client.connect("127.0.0.1", 1) is None
    assert "Already connected" in log_stream.getvalue()


def test_kil_from_server_disconnects(client, fake_server):
    _, address = _handshake(client, fake_server)
    fake_server.sendto(Packet().write_string("KIL").to_bytes(), address)
    data, _ = fake_server.recvfrom(65536)
    packet = Packet(data)
    assert packet.read_string() == "KIL"
    assert packet.read_string() == "client-uuid"
    assert _wait_for(lambda: not client.connected)
    assert client.server == PacketAddress()


def test_packets_from_strangers_are_ignored(client, fake_server):
    _handshake(client, fake_server)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as stranger:
        stranger.sendto(Packet().write_string("KIL").to_bytes(), ("127.0.0.1", client.port))
    time.sleep(0.2)
    assert client.connected


def test_file_from_server_is_stored(client, fake_server, tmp_path):
    _, address = _handshake(client, fake_server)
    assert client.connected is True
    packet = Packet().write_string("FILE")
    FileDescriptor("note.txt", 5).write_to(packet)
    packet.write_bytes(b"hello")
    fake_server.sendto(packet.to_bytes(), address)
    target = tmp_path / "in" / "note.txt"
    _wait_for(lambda: target.exists() and target.read_bytes() == b"hello")
    assert target.read_bytes() == b"hello"
    assert client.server == PacketAddress("127.0.0.1", fake_server.getsockname()[1])


def test_server_silence_disconnects(tmp_path, fake_server):
    with Client(
        "client-uuid",
        files_folder=str(tmp_path),
        server_timeout=0.2,
        poll_interval=0.02,
        logger=Logger("Client", io.StringIO()),
    ) as cli:
        _handshake(cli, fake_server)
        data, _ = fake_server.recvfrom(65536)
        assert Packet(data).read_string() == "KIL"
        assert _wait_for(lambda: not cli.connected)


def test_send_to_server_clears_packet(client, fake_server):
    _handshake(client, fake_server)
    packet = Packet().write_string("hello")
    assert client.send(packet) is True
    assert len(packet) == 0
    data, _ = fake_server.recvfrom(65536)
    assert Packet(data).read_string() == "hello"


def test_send_to_address_keeps_packet(client, fake_server):
    packet = Packet().write_string("ping")
    assert client.send(packet, "127.0.0.1", fake_server.getsockname()[1]) is True
    assert packet.read_string() == "ping"


def test_send_with_only_ip_raises(client):
    with pytest.raises(ValueError):
        client.send(Packet(), "127.0.0.1")


def test_send_file_not_connected_raises(client, tmp_path):
    path = tmp_path / "f.txt"
    path.write_bytes(b"abc")
    with pytest.raises(LoggedError):
        client.send_file(path)


def test_send_file_carries_identifier_and_content(client, fake_server, tmp_path):
    _handshake(client, fake_server)
    path = tmp_path / "save.dat"
    path.write_bytes(b"\x01\x02data")
    assert client.send_file(path) is True
    data, _ = fake_server.recvfrom(65536)
    packet = Packet(data)
    assert packet.read_string() == "FILE"
    assert packet.read_string() == "client-uuid"
    descriptor = FileDescriptor.read_from(packet)
    assert descriptor.filename == "save.dat"
    assert packet.read_rest() == b"\x01\x02data"


def test_send_missing_file_raises(client, fake_server, tmp_path):
    _handshake(client, fake_server)
    with pytest.raises(LoggedError):
        client.send_file(tmp_path / "missing")


def test_receive_file_directly(client, tmp_path):
    packet = FileDescriptor("a.txt", 3).write_to(Packet()).write_bytes(b"xyz")
    path = client.receive_file(tmp_path / "out", packet)
    with open(path, "rb") as handle:
        assert handle.read() == b"xyz"


def test_disconnect_when_not_connected_is_reported(client, log_stream):
    client.disconnect()
    assert "Not connected to any server." in log_stream.getvalue()
    assert not client.connected


def test_consume_packet_empty(client):
    assert client.consume_packet() is None
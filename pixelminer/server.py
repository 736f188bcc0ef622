"""UDP game server: accepts clients by identifier and exchanges control messages and files."""

from __future__ import annotations

import os
import select
import socket
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from .logger import LoggedError, Logger
from .packet import (
    BINARY_MODE,
    MAX_DATAGRAM_SIZE,
    FileDescriptor,
    Packet,
    PacketAddress,
    PacketError,
    validate_path,
)

_RECV_SIZE = 65536


@dataclass
class Connection:
    """A known client and when its timeout clock started."""

    ip: str = "0.0.0.0"
    port: int = 0
    timeout: float = 10.0
    started: float = field(default_factory=time.monotonic)
    active: bool = True


def _read_or_empty(packet: Packet) -> str:
    try:
        return packet.read_string()
    except PacketError:
        return ""


class Server:
    """Listens on a UDP port and tracks client connections by identifier."""

    def __init__(
        self,
        uuid: str,
        files_folder: str | os.PathLike = "Assets/Server",
        clock: Callable[[], float] = time.monotonic,
        poll_interval: float = 0.1,
        logger: Optional[Logger] = None,
    ) -> None:
        self.uuid = uuid
        self.files_folder = files_folder
        self.logger = logger or Logger("Server")
        self._clock = clock
        self._poll = poll_interval
        self._lock = threading.RLock()
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._queue: deque[tuple[PacketAddress, Packet]] = deque()
        self._thread: Optional[threading.Thread] = None
        self.connections: dict[str, Connection] = {}
        self.online = False

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info) -> None:
        if self.online:
            self.shutdown()
        else:
            self._socket.close()

    @property
    def port(self) -> int:
        """Local port the server is bound to."""
        return self._socket.getsockname()[1]

    # ------------------------------------------------------------------ listening

    def listen(self, port: int) -> None:
        """Bind to ``port`` and start handling datagrams in the background."""
        try:
            self._socket.bind(("", port))
        except OSError:
            self.logger.error(f"Could not bind to port {port}")
        self.online = True
        self._thread = threading.Thread(target=self._listen_loop, daemon=True)
        self._thread.start()

    def _listen_loop(self) -> None:
        host, port = self._socket.getsockname()
        self.logger.info(f"Server ({host}:{port}) online.")
        while self.online:
            with self._lock:
                self._handle_timed_out_connections()
            try:
                readable, _, _ = select.select([self._socket], [], [], self._poll)
            except (OSError, ValueError):
                break
            if not readable:
                continue
            try:
                data, (ip, sender_port) = self._socket.recvfrom(_RECV_SIZE)
            except OSError:
                continue
            with self._lock:
                self._queue.append((PacketAddress(ip, sender_port), Packet(data)))
                self._handle_packets()
        self.logger.info(f"Server ({host}:{port}) offline.")

    def _handle_packets(self) -> None:
        for address, packet in iter(self.consume_packet, None):
            header = _read_or_empty(packet)
            uuid = _read_or_empty(packet)
            try:
                if header == "ASK+UUID":
                    self._handle_ask_uuid(uuid, address.ip, address.port)
                elif not self.is_client_connected(address.ip, address.port):
                    continue
                elif header == "KIL":
                    self.disconnect_client(uuid)
                elif header == "FILE":
                    self.receive_file(address.ip, address.port, self.files_folder, packet)
            except (LoggedError, KeyError, OSError, PacketError) as exc:
                self.logger.error(f"Could not handle {header!r} from {address.ip}: {exc}", False)

    def _handle_timed_out_connections(self) -> None:
        timed_out = []
        for uuid, conn in self.connections.items():
            if conn.active and self._clock() - conn.started >= conn.timeout:
                self.logger.info(
                    f"Connection with client {conn.ip} timed out after {conn.timeout} seconds."
                )
                conn.active = False
                timed_out.append(uuid)
        for uuid in timed_out:
            self.disconnect_client(uuid)

    def _handle_ask_uuid(self, uuid: str, ip: str, port: int) -> None:
        if uuid == self.uuid:
            self.logger.error("Connecting to self is not allowed.", False)
            self.send_control_message("RFS", ip, port)
            return

        conn = self.connections.get(uuid)
        if conn is not None:
            if conn.active:
                self.logger.error(f"Client with IP is already connected: {ip}", False)
                return
            self.logger.info(f"Client with IP reconnected: {ip}")
            conn.ip = ip
            conn.port = port
            conn.active = True
            conn.started = self._clock()
            self.send_control_message("ACK", ip, port)
            return

        if self.create_connection(ip, port, uuid):
            self.send_control_message("ACK", ip, port)
        else:
            self.send_control_message("RFS", ip, port)

    # ------------------------------------------------------------------ connections

    def create_connection(self, ip: str, port: int, uuid: str) -> bool:
        """Register a client; False if the identifier is already known."""
        with self._lock:
            if uuid in self.connections:
                self.logger.error(f"Client with IP is already connected: {ip}", False)
                return False
            self.connections[uuid] = Connection(ip, port, 10.0, self._clock(), False)
        self.logger.info(f"Client with IP {ip} is now connected.")
        return True

    def disconnect_client(self, uuid: str) -> None:
        """Mark a client inactive and tell it to leave; unknown clients raise KeyError."""
        with self._lock:
            conn = self.connections.get(uuid)
            if conn is None:
                self.logger.error(f"Client with UUID {uuid} is not connected.", False)
                raise KeyError(uuid)
            conn.active = False
            self.send_control_message("KIL", conn.ip, conn.port)
        self.logger.info(f"Client with IP {conn.ip} is now disconnected.")

    def is_client_connected(self, ip: str, port: int) -> bool:
        """Whether any known client has this IP address; the port is not compared."""
        with self._lock:
            return any(conn.ip == ip for conn in self.connections.values())

    # ------------------------------------------------------------------ sending

    def send(self, packet: Packet, ip: str, port: int) -> bool:
        """Send a packet; a failure raises :class:`LoggedError`."""
        try:
            self._socket.sendto(packet.to_bytes(), (ip, port))
        except OSError:
            self.logger.error(f"Could not send packet to: {ip}:{port}")
        return True

    def send_control_message(self, header: str, ip: str, port: int) -> None:
        """Send a packet holding only a header."""
        self.send(Packet().write_string(header), ip, port)

    def send_file(
        self, ip: str, port: int, path: str | os.PathLike, mode: int = BINARY_MODE
    ) -> None:
        """Send a whole file to a connected client in one packet."""
        if not self.is_client_connected(ip, port):
            self.logger.error(f"Client is not connected: {ip}")
        if not validate_path(path):
            self.logger.error(f"Invalid file: {os.fspath(path)}")

        descriptor = FileDescriptor.from_path(path, mode)
        if descriptor.filesize > MAX_DATAGRAM_SIZE:
            raise PacketError(f"File too big: {os.fspath(path)}")

        with open(path, "rb") as handle:
            content = handle.read()
        packet = Packet().write_string("FILE")
        descriptor.write_to(packet)
        packet.write_bytes(content)

        self.send(packet, ip, port)
        self.logger.info(f"Sent file {descriptor.filename}")

    def receive_file(
        self, ip: str, port: int, folder: str | os.PathLike, packet: Packet
    ) -> str:
        """Write the file carried by ``packet`` into ``folder`` and return its path."""
        if not self.is_client_connected(ip, port):
            raise ConnectionError(f"Client not connected: {ip}")
        os.makedirs(folder, exist_ok=True)

        descriptor = FileDescriptor.read_from(packet)
        target = os.path.join(os.fspath(folder), os.path.basename(descriptor.filename))
        content = packet.read_rest()
        try:
            with open(target, "wb") as handle:
                handle.write(content)
        except OSError as exc:
            raise OSError(f"Could not write file: {target}") from exc

        self.logger.info(f"Received file: {descriptor.filename}")
        return target

    # ------------------------------------------------------------------ lifecycle

    def shutdown(self) -> None:
        """Tell every client to leave and stop listening."""
        if not self.online:
            self.logger.error("Server is not online")
        with self._lock:
            for conn in list(self.connections.values()):
                self.send_control_message("KIL", conn.ip, conn.port)
            self.online = False
        self._socket.close()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self.logger.info("Server is down")

    def consume_packet(self) -> Optional[tuple[PacketAddress, Packet]]:
        """Take the oldest queued packet, or ``None`` if none is waiting."""
        with self._lock:
            return self._queue.popleft() if self._queue else None
"""UDP game client: connects to a server by identifier and exchanges files."""

from __future__ import annotations

import os
import select
import socket
import threading
import time
from collections import deque
from typing import Optional

from .logger import Logger
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


def _read_or_empty(packet: Packet) -> str:
    try:
        return packet.read_string()
    except PacketError:
        return ""


class Client:
    """Connects to one server at a time and handles its control messages."""

    def __init__(
        self,
        uuid: str,
        files_folder: str | os.PathLike = "Assets/Client/",
        server_timeout: float = 10.0,
        poll_interval: float = 0.1,
        logger: Optional[Logger] = None,
    ) -> None:
        self.uuid = uuid
        self.files_folder = files_folder
        self.server_timeout = server_timeout
        self.logger = logger or Logger("Client")
        self._poll = poll_interval
        self._lock = threading.Lock()
        self._queue: deque[tuple[PacketAddress, Packet]] = deque()
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._socket.bind(("", 0))
        except OSError:
            self._socket.close()
            self.logger.error("Could not bind to a port")
        self._socket.setblocking(False)
        self.server = PacketAddress()
        self._ready = True
        self._connected = False

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def ready(self) -> bool:
        """False while a connection attempt is in progress."""
        return self._ready

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def port(self) -> int:
        """Local port the client is bound to."""
        return self._socket.getsockname()[1]

    # ------------------------------------------------------------------ connecting

    def connect(self, ip: str, port: int, timeout: float = 10.0) -> Optional[threading.Thread]:
        """Start connecting in the background and return the thread doing it.

        Returns ``None`` and reports an error if already connected.
        """
        if self._connected:
            self.logger.error(
                f"Already connected to {self.server.ip}:{self.server.port}", False
            )
            return None
        thread = threading.Thread(target=self._connector, args=(ip, port, timeout), daemon=True)
        thread.start()
        return thread

    def _wait_reply(self, timeout: float) -> Optional[tuple[bytes, tuple[str, int]]]:
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            try:
                readable, _, _ = select.select([self._socket], [], [], remaining)
            except (OSError, ValueError):
                return None
            if not readable:
                return None
            try:
                return self._socket.recvfrom(_RECV_SIZE)
            except OSError:
                continue

    def _connector(self, ip: str, port: int, timeout: float) -> None:
        self._ready = False
        request = Packet().write_string("ASK+UUID").write_string(self.uuid)
        if not self.send(request, ip, port):
            self.logger.error(f"Could not connect to {ip}:{port}", False)
            self._ready = True
            self._connected = False
            return

        reply = self._wait_reply(timeout)
        if reply is None:
            self.logger.error(f"Connection timeout: {ip}:{port}", False)
            self._ready = True
            self._connected = False
            return

        data, (reply_ip, reply_port) = reply
        self._ready = True
        header = _read_or_empty(Packet(data))
        if header == "ACK":
            self._accept(reply_ip, reply_port, "Connected to server")
        elif header == "RCN":
            self._accept(reply_ip, reply_port, "Reconnected to server")
        elif header == "RFS":
            self.logger.error(f"Connection refused by server {reply_ip}:{reply_port}.", False)
            self._connected = False
        else:
            self.logger.error(f"Bad response from server {reply_ip}:{reply_port}.", False)
            self._connected = False

    def _accept(self, ip: str, port: int, verb: str) -> None:
        self.logger.info(f"{verb}: {ip}:{port}.")
        self.server = PacketAddress(ip, port)
        self._ready = True
        self._connected = True
        threading.Thread(target=self._listen_loop, daemon=True).start()

    def _listen_loop(self) -> None:
        last_traffic = time.monotonic()
        while self._connected:
            try:
                readable, _, _ = select.select([self._socket], [], [], self._poll)
            except (OSError, ValueError):
                break
            if not readable:
                if time.monotonic() - last_traffic >= self.server_timeout:
                    self.logger.info(
                        f"Connection with server {self.server.ip} timed out after "
                        f"{self.server_timeout:g} seconds."
                    )
                    self.disconnect()
                continue
            try:
                data, (ip, port) = self._socket.recvfrom(_RECV_SIZE)
            except OSError:
                continue
            last_traffic = time.monotonic()
            if (ip, port) != (self.server.ip, self.server.port):
                continue
            with self._lock:
                self._queue.append((PacketAddress(ip, port), Packet(data)))
            self._handle_packets()

    def _handle_packets(self) -> None:
        for _, packet in iter(self.consume_packet, None):
            header = _read_or_empty(packet)
            if header == "KIL":
                self.disconnect()
                break
            if header == "FILE":
                try:
                    self.receive_file(self.files_folder, packet)
                except (OSError, PacketError) as exc:
                    self.logger.error(f"Could not receive file: {exc}", False)

    def disconnect(self) -> None:
        """Tell the server we leave and forget it; reports an error if not connected."""
        if not self._connected:
            self.logger.error("Not connected to any server.", False)
            return
        request = Packet().write_string("KIL").write_string(self.uuid)
        if not self.send(request):
            self.logger.error("Failed to communicate with server. Disconnecting anyway.", False)
        self._connected = False
        self.logger.info(f"Disconnected from server {self.server.ip}:{self.server.port}.")
        self.server = PacketAddress()

    # ------------------------------------------------------------------ sending

    def send(self, packet: Packet, ip: Optional[str] = None, port: Optional[int] = None) -> bool:
        """Send to the given address, or to the server if none is given.

        A packet sent to the server is cleared afterwards. Failures are
        reported and return False.
        """
        if (ip is None) != (port is None):
            raise ValueError("Give both an IP address and a port, or neither")
        to_server = ip is None
        target = (self.server.ip, self.server.port) if to_server else (ip, port)
        try:
            self._socket.sendto(packet.to_bytes(), target)
        except OSError:
            self.logger.error(f"Error sending packet to {target[0]}:{target[1]}", False)
            return False
        if to_server:
            packet.clear()
        return True

    def send_file(self, path: str | os.PathLike, mode: int = BINARY_MODE) -> bool:
        """Send a whole file to the server in one packet."""
        if not self._connected:
            self.logger.error("Not connected to any server.")
        name = os.fspath(path)
        if not validate_path(path):
            self.logger.error(f'File "{name}" does not exist.')
        descriptor = FileDescriptor.from_path(path, mode)
        if descriptor.filesize > MAX_DATAGRAM_SIZE:
            self.logger.error(f'File "{name}" too large ({descriptor.filesize} bytes).')
        try:
            with open(path, "rb") as handle:
                content = handle.read()
        except OSError:
            self.logger.error(f'Could not open file "{name}"')

        packet = Packet().write_string("FILE").write_string(self.uuid)
        descriptor.write_to(packet)
        packet.write_bytes(content)
        if not self.send(packet):
            return False
        self.logger.info(
            f'Sent file "{name}" ({descriptor.filesize} bytes) to {self.server.ip}'
        )
        return True

    def receive_file(self, folder: str | os.PathLike, packet: Packet) -> str:
        """Write the file carried by ``packet`` into ``folder`` and return its path."""
        os.makedirs(folder, exist_ok=True)
        descriptor = FileDescriptor.read_from(packet)
        target = os.path.join(os.fspath(folder), os.path.basename(descriptor.filename))
        content = packet.read_rest()
        try:
            with open(target, "wb") as handle:
                handle.write(content)
        except OSError:
            self.logger.error(f'Could not write file "{target}"')
        self.logger.info(f'Received file "{target}" ({descriptor.filesize} bytes).')
        return target

    def consume_packet(self) -> Optional[tuple[PacketAddress, Packet]]:
        """Take the oldest queued packet, or ``None`` if none is waiting."""
        with self._lock:
            return self._queue.popleft() if self._queue else None

    def close(self) -> None:
        """Stop listening and release the socket without notifying the server."""
        self._connected = False
        self._socket.close()
"""Datagram packets, file descriptors sent over the network and peer addresses."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass

MAX_DATAGRAM_SIZE = 65507
BINARY_MODE = 4  # open-mode flag carried by descriptors of binary files

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_I32 = struct.Struct(">i")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")


class PacketError(ValueError):
    """Raised when a packet cannot be read or a value cannot be written."""


class Packet:
    """A growable byte buffer with a read cursor; numbers use network byte order."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Packet(size={len(self._data)}, read={self._pos})"

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self.remaining == 0

    def clear(self) -> None:
        """Drop all content and rewind the read cursor."""
        self._data.clear()
        self._pos = 0

    def _write(self, record: struct.Struct, value: int) -> "Packet":
        try:
            self._data += record.pack(value)
        except struct.error as exc:
            raise PacketError(f"Value out of range: {value}") from exc
        return self

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise PacketError(f"Cannot read {size} bytes, {self.remaining} left")
        chunk = bytes(self._data[self._pos : self._pos + size])
        self._pos += size
        return chunk

    def _read(self, record: struct.Struct) -> int:
        return record.unpack(self._take(record.size))[0]

    def write_string(self, value: str) -> "Packet":
        """Append a string as a 32-bit length followed by its UTF-8 bytes."""
        raw = value.encode("utf-8")
        self._write(_U32, len(raw))
        self._data += raw
        return self

    def read_string(self) -> str:
        length = self._read(_U32)
        if length > self.remaining:
            self._pos -= _U32.size
            raise PacketError(f"String of {length} bytes exceeds packet")
        return self._take(length).decode("utf-8", errors="replace")

    def write_uint8(self, value: int) -> "Packet":
        return self._write(_U8, value)

    def read_uint8(self) -> int:
        return self._read(_U8)

    def write_uint16(self, value: int) -> "Packet":
        return self._write(_U16, value)

    def read_uint16(self) -> int:
        return self._read(_U16)

    def write_int32(self, value: int) -> "Packet":
        return self._write(_I32, value)

    def read_int32(self) -> int:
        return self._read(_I32)

    def write_uint64(self, value: int) -> "Packet":
        return self._write(_U64, value)

    def read_uint64(self) -> int:
        return self._read(_U64)

    def write_bytes(self, data: bytes) -> "Packet":
        """Append raw bytes."""
        self._data += data
        return self

    def read_rest(self) -> bytes:
        """Return every unread byte and move the cursor to the end."""
        return self._take(self.remaining)

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Packet":
        return cls(data)


@dataclass(frozen=True)
class PacketAddress:
    """Where a packet came from."""

    ip: str = "0.0.0.0"
    port: int = 0


@dataclass
class FileDescriptor:
    """Description of a file sent in a packet."""

    filename: str
    filesize: int
    mode: int = BINARY_MODE
    part: int = 1
    total_parts: int = 1

    @classmethod
    def from_path(cls, path: str | os.PathLike, mode: int = BINARY_MODE) -> "FileDescriptor":
        """Describe an existing file as a single part."""
        return cls(
            filename=os.path.basename(os.fspath(path)),
            filesize=os.path.getsize(path),
            mode=int(mode),
        )

    def write_to(self, packet: Packet) -> Packet:
        """Append the descriptor's fields to a packet."""
        return (
            packet.write_string(self.filename)
            .write_uint64(self.filesize)
            .write_int32(self.mode)
            .write_uint16(self.part)
            .write_uint16(self.total_parts)
        )

    @classmethod
    def read_from(cls, packet: Packet) -> "FileDescriptor":
        """Read a descriptor from the packet's cursor."""
        return cls(
            filename=packet.read_string(),
            filesize=packet.read_uint64(),
            mode=packet.read_int32(),
            part=packet.read_uint16(),
            total_parts=packet.read_uint16(),
        )


def validate_path(path: str | os.PathLike) -> bool:
    """Whether the path exists."""
    return os.path.exists(path)
"""Connection handshake: protocol version and identity exchange."""

from __future__ import annotations

import asyncio
import struct
from dataclasses import dataclass

PROTOCOL_VERSION = 1
MAGIC_BYTES = b"MINSQL"
SERVER_VERSION = "0.1.0"

_U32 = struct.Struct(">I")
_MAX_HANDSHAKE_READ = 1024


class HandshakeError(Exception):
    """Raised when a handshake message is malformed or rejected."""


def _read_u32(data: bytes, offset: int, what: str) -> tuple[int, int]:
    if len(data) - offset < _U32.size:
        raise HandshakeError(f"Incomplete handshake {what}")
    return _U32.unpack_from(data, offset)[0], offset + _U32.size


def _read_text(data: bytes, offset: int, length: int, what: str, field: str) -> tuple[str, int]:
    if len(data) - offset < length:
        raise HandshakeError(f"Incomplete handshake {what}")
    try:
        text = data[offset : offset + length].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HandshakeError(f"Invalid {field}") from exc
    return text, offset + length


@dataclass(frozen=True)
class HandshakeRequest:
    """The client's opening message."""

    client_name: str
    protocol_version: int = PROTOCOL_VERSION

    def encode(self) -> bytes:
        name = self.client_name.encode("utf-8")
        return MAGIC_BYTES + _U32.pack(self.protocol_version) + _U32.pack(len(name)) + name

    @classmethod
    def decode(cls, data: bytes) -> "HandshakeRequest":
        data = bytes(data)
        if len(data) < len(MAGIC_BYTES):
            raise HandshakeError("Incomplete handshake request")
        if data[: len(MAGIC_BYTES)] != MAGIC_BYTES:
            raise HandshakeError("Invalid magic bytes")
        offset = len(MAGIC_BYTES)
        version, offset = _read_u32(data, offset, "request")
        name_len, offset = _read_u32(data, offset, "request")
        name, _ = _read_text(data, offset, name_len, "request", "client name")
        return cls(client_name=name, protocol_version=version)


@dataclass(frozen=True)
class HandshakeResponse:
    """The server's reply, naming its version and node."""

    node_id: int
    server_version: str = SERVER_VERSION
    protocol_version: int = PROTOCOL_VERSION

    def encode(self) -> bytes:
        version = self.server_version.encode("utf-8")
        return (
            _U32.pack(self.protocol_version)
            + _U32.pack(len(version))
            + version
            + _U32.pack(self.node_id)
        )

    @classmethod
    def decode(cls, data: bytes) -> "HandshakeResponse":
        data = bytes(data)
        protocol_version, offset = _read_u32(data, 0, "response")
        version_len, offset = _read_u32(data, offset, "response")
        server_version, offset = _read_text(
            data, offset, version_len, "response", "server version"
        )
        node_id, _ = _read_u32(data, offset, "response")
        return cls(
            node_id=node_id,
            server_version=server_version,
            protocol_version=protocol_version,
        )


async def perform_handshake(
    reader: asyncio.StreamReader, writer: asyncio.StreamWriter, node_id: int
) -> HandshakeRequest:
    """Read a client's request, check its version and answer it."""
    data = await reader.read(_MAX_HANDSHAKE_READ)
    if not data:
        raise HandshakeError("Connection closed during handshake")

    request = HandshakeRequest.decode(data)
    if request.protocol_version != PROTOCOL_VERSION:
        raise HandshakeError(f"Unsupported protocol version: {request.protocol_version}")

    writer.write(HandshakeResponse(node_id).encode())
    await writer.drain()
    return request
"""Length-prefixed message frames exchanged between client and server."""

from __future__ import annotations

import asyncio
import struct
from dataclasses import dataclass
from enum import IntEnum

MAX_FRAME_LENGTH = 100 * 1024 * 1024

_LENGTH = struct.Struct(">I")


class FrameError(Exception):
    """Raised when a frame cannot be read or is malformed."""


class MessageType(IntEnum):
    QUERY = 1
    QUERY_RESPONSE = 2
    ERROR = 3
    EXECUTE = 4
    EXECUTE_RESPONSE = 5


@dataclass(frozen=True)
class Frame:
    """A message: a big-endian u32 length, a type byte, then the payload."""

    message_type: MessageType
    payload: bytes = b""

    def encode(self) -> bytes:
        """Serialise the frame to its wire form."""
        payload = bytes(self.payload)
        return (
            _LENGTH.pack(len(payload) + 1)
            + bytes([int(self.message_type)])
            + payload
        )

    @classmethod
    async def read_from(cls, reader: asyncio.StreamReader) -> "Frame":
        """Read one frame from ``reader``; raise :class:`FrameError` on bad input."""
        try:
            header = await reader.readexactly(_LENGTH.size)
        except asyncio.IncompleteReadError as exc:
            raise FrameError("Failed to read frame length") from exc
        (length,) = _LENGTH.unpack(header)

        if length == 0 or length > MAX_FRAME_LENGTH:
            raise FrameError(f"Invalid frame length: {length}")

        try:
            type_byte = (await reader.readexactly(1))[0]
        except asyncio.IncompleteReadError as exc:
            raise FrameError("Failed to read message type") from exc
        try:
            message_type = MessageType(type_byte)
        except ValueError as exc:
            raise FrameError(f"Unknown message type: {type_byte}") from exc

        try:
            payload = await reader.readexactly(length - 1)
        except asyncio.IncompleteReadError as exc:
            raise FrameError("Failed to read payload") from exc

        return cls(message_type, payload)

    async def write_to(self, writer: asyncio.StreamWriter) -> None:
        """Write the encoded frame to ``writer`` and flush it."""
        writer.write(self.encode())
        await writer.drain()
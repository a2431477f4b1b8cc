"""BLAKE3 hash (default hashing mode, extendable output)."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_MASK = 0xFFFFFFFF
_IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_BLOCK_LEN = 64
_CHUNK_LEN = 1024

_BLOCK_WORDS = struct.Struct("<16I")


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _g(s: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    s[a] = (s[a] + s[b] + mx) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b] + my) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 7)


def _round(s: list[int], m: list[int]) -> None:
    _g(s, 0, 4, 8, 12, m[0], m[1])
    _g(s, 1, 5, 9, 13, m[2], m[3])
    _g(s, 2, 6, 10, 14, m[4], m[5])
    _g(s, 3, 7, 11, 15, m[6], m[7])
    _g(s, 0, 5, 10, 15, m[8], m[9])
    _g(s, 1, 6, 11, 12, m[10], m[11])
    _g(s, 2, 7, 8, 13, m[12], m[13])
    _g(s, 3, 4, 9, 14, m[14], m[15])


def _compress(
    cv: tuple[int, ...], block: tuple[int, ...], counter: int, block_len: int, flags: int
) -> list[int]:
    state = [*cv, *_IV[:4], counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    message = list(block)
    for round_number in range(7):
        _round(state, message)
        if round_number < 6:
            message = [message[i] for i in _PERMUTATION]
    low, high = state[:8], state[8:]
    return [x ^ y for x, y in zip(low, high)] + [y ^ c for y, c in zip(high, cv)]


def _words(block: bytes) -> tuple[int, ...]:
    return _BLOCK_WORDS.unpack(block.ljust(_BLOCK_LEN, b"\0"))


@dataclass(frozen=True)
class _Output:
    cv: tuple[int, ...]
    block: tuple[int, ...]
    counter: int
    block_len: int
    flags: int

    def chaining_value(self) -> tuple[int, ...]:
        return tuple(_compress(self.cv, self.block, self.counter, self.block_len, self.flags)[:8])

    def root_bytes(self, length: int) -> bytes:
        out = bytearray()
        counter = 0
        while len(out) < length:
            words = _compress(self.cv, self.block, counter, self.block_len, self.flags | _ROOT)
            out += _BLOCK_WORDS.pack(*words)
            counter += 1
        return bytes(out[:length])


def _chunk_output(chunk: bytes, counter: int) -> _Output:
    blocks = [chunk[i : i + _BLOCK_LEN] for i in range(0, len(chunk), _BLOCK_LEN)] or [b""]
    *body, last = blocks
    cv = _IV
    start_flag = _CHUNK_START
    for block in body:
        cv = tuple(_compress(cv, _words(block), counter, _BLOCK_LEN, start_flag)[:8])
        start_flag = 0
    return _Output(cv, _words(last), counter, len(last), start_flag | _CHUNK_END)


def _subtree_output(chunks: list[bytes], first_counter: int) -> _Output:
    if len(chunks) == 1:
        return _chunk_output(chunks[0], first_counter)
    left_count = 1 << ((len(chunks) - 1).bit_length() - 1)
    left = _subtree_output(chunks[:left_count], first_counter).chaining_value()
    right = _subtree_output(chunks[left_count:], first_counter + left_count).chaining_value()
    return _Output(_IV, left + right, 0, _BLOCK_LEN, _PARENT)


def blake3(data: bytes, length: int = 32) -> bytes:
    """Return ``length`` bytes of the BLAKE3 hash of ``data``."""
    if length < 0:
        raise ValueError("output length must not be negative")
    data = bytes(data)
    chunks = [data[i : i + _CHUNK_LEN] for i in range(0, len(data), _CHUNK_LEN)] or [b""]
    return _subtree_output(chunks, 0).root_bytes(length)
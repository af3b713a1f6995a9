"""MD5 message digest (RFC 1321) computed in pure Python."""

from __future__ import annotations

import math
import struct

__all__ = ["MD5", "md5"]

_MASK = 0xFFFFFFFF

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

_SHIFTS = (
    (7, 12, 17, 22) * 4
    + (5, 9, 14, 20) * 4
    + (4, 11, 16, 23) * 4
    + (6, 10, 15, 21) * 4
)

# T[i] = floor(abs(sin(i + 1)) * 2**32), the additive constants of each step.
_CONSTANTS = tuple(int(abs(math.sin(i + 1)) * 2**32) & _MASK for i in range(64))

_BLOCK = struct.Struct("<16I")


def _rotate_left(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK


def _transform(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    """Fold one 64-byte block into the four-word state."""
    words = _BLOCK.unpack(block)
    a, b, c, d = state
    for step in range(64):
        if step < 16:
            f = (b & c) | (~b & d)
            index = step
        elif step < 32:
            f = (b & d) | (c & ~d)
            index = (5 * step + 1) % 16
        elif step < 48:
            f = b ^ c ^ d
            index = (3 * step + 5) % 16
        else:
            f = c ^ (b | ~d)
            index = (7 * step) % 16
        f &= _MASK
        rotated = _rotate_left((a + f + _CONSTANTS[step] + words[index]) & _MASK, _SHIFTS[step])
        a, d, c, b = d, c, b, (b + rotated) & _MASK
    return tuple((s + v) & _MASK for s, v in zip(state, (a, b, c, d)))  # type: ignore[return-value]


class MD5:
    """Incremental MD5 hasher with an interface close to ``hashlib``."""

    digest_size = 16
    block_size = 64
    name = "md5"

    def __init__(self, data: bytes = b"") -> None:
        self._state: tuple[int, int, int, int] = _INITIAL_STATE
        self._length = 0
        self._buffer = b""
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the digest."""
        if isinstance(data, str):
            raise TypeError("strings must be encoded before hashing")
        chunk = bytes(data)
        self._length += len(chunk)
        pending = self._buffer + chunk
        full = len(pending) - len(pending) % 64
        for start in range(0, full, 64):
            self._state = _transform(self._state, pending[start:start + 64])
        self._buffer = pending[full:]

    def digest(self) -> bytes:
        """Return the 16-byte digest of everything fed so far."""
        index = self._length % 64
        pad_len = 56 - index if index < 56 else 120 - index
        bit_count = (self._length * 8) & 0xFFFFFFFFFFFFFFFF
        tail = self._buffer + b"\x80" + b"\x00" * (pad_len - 1) + struct.pack("<Q", bit_count)
        state = self._state
        for start in range(0, len(tail), 64):
            state = _transform(state, tail[start:start + 64])
        return struct.pack("<4I", *state)

    def hexdigest(self) -> str:
        """Return the digest as 32 lower-case hexadecimal characters."""
        return self.digest().hex()

    def copy(self) -> "MD5":
        """Return an independent hasher with the same state."""
        clone = MD5()
        clone._state = self._state
        clone._length = self._length
        clone._buffer = self._buffer
        return clone


def md5(data: bytes = b"") -> MD5:
    """Create an :class:`MD5` hasher primed with ``data``."""
    return MD5(data)
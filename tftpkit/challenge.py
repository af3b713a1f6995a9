"""Session check run right after connect or accept.

Both ends swap a protocol version and a random challenge, then each
returns the other's challenge scrambled with a shared key.  The
connection is accepted only if the versions match and each side gets
its own challenge back once the scrambling is undone.
"""

from __future__ import annotations

import random
import socket
import struct
import time

from .tcp4u import Tcp4uError, pp_recv, pp_send

__all__ = [
    "CHALLENGE_SIZE",
    "FRAME_SIZE",
    "VersionMismatch",
    "BadAuthentication",
    "sym_crypt",
    "pack_challenge",
    "unpack_challenge",
    "exchange_challenge",
]

CHALLENGE_SIZE = 12
# version (int32, little endian), challenge, pad byte, alignment to 4 bytes
_FRAME = struct.Struct("<i12sBxxx")
FRAME_SIZE = _FRAME.size
_RECV_TIMEOUT = 10


class VersionMismatch(Tcp4uError):
    """The peer speaks another protocol version."""

    def __init__(self, local_version: int, peer_version: int) -> None:
        super().__init__(f"peer version {peer_version} differs from {local_version}")
        self.local_version = local_version
        self.peer_version = peer_version


class BadAuthentication(Tcp4uError):
    """The peer did not return our challenge scrambled with the shared key."""


def _key_bytes(key: str | bytes) -> bytes:
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if not raw:
        raise ValueError("the key must not be empty")
    return raw


def sym_crypt(data: bytes, key: str | bytes) -> bytes:
    """Scramble ``data`` with ``key``; applying it twice gives ``data`` back."""
    raw_key = _key_bytes(key)
    size = len(raw_key)
    return bytes(byte ^ raw_key[index * 13 % size] for index, byte in enumerate(bytes(data)))


def pack_challenge(version: int, challenge: bytes) -> bytes:
    """Build the fixed-size frame carrying ``version`` and a 12-byte ``challenge``."""
    challenge = bytes(challenge)
    if len(challenge) != CHALLENGE_SIZE:
        raise ValueError(f"challenge must be {CHALLENGE_SIZE} bytes, got {len(challenge)}")
    return _FRAME.pack(version, challenge, 0)


def unpack_challenge(frame: bytes) -> tuple[int, bytes]:
    """Split a frame built by :func:`pack_challenge` into version and challenge."""
    frame = bytes(frame)
    if len(frame) != FRAME_SIZE:
        raise ValueError(f"challenge frame must be {FRAME_SIZE} bytes, got {len(frame)}")
    version, challenge, _pad = _FRAME.unpack(frame)
    return version, challenge


def exchange_challenge(
    sock: socket.socket,
    seed: int,
    version: int,
    key: str | bytes,
) -> int:
    """Run the challenge exchange on a connected socket and return the peer version.

    Raises :class:`VersionMismatch` or :class:`BadAuthentication` when the
    peer does not pass, and the errors of :mod:`tftpkit.tcp4u` on I/O failure.
    """
    _key_bytes(key)
    rng = random.Random(time.time_ns() + seed + sock.fileno())
    ours = bytes(rng.randrange(256) for _ in range(CHALLENGE_SIZE))

    pp_send(sock, pack_challenge(version, ours))
    peer_version, theirs = unpack_challenge(pp_recv(sock, _RECV_TIMEOUT))
    if peer_version != version:
        raise VersionMismatch(version, peer_version)

    pp_send(sock, pack_challenge(peer_version, sym_crypt(theirs, key)))
    _, answer = unpack_challenge(pp_recv(sock, _RECV_TIMEOUT))
    if sym_crypt(answer, key) != ours:
        raise BadAuthentication("peer failed the challenge")
    return peer_version
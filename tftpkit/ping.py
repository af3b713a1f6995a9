"""ICMP echo (ping) over a raw IPv4 socket."""

from __future__ import annotations

import itertools
import select
import socket
import struct
import time
from dataclasses import dataclass

__all__ = [
    "ICMP_ECHO_REPLY",
    "ICMP_DEST_UNREACH",
    "ICMP_ECHO_REQUEST",
    "ICMP_TTL_EXPIRE",
    "PINGAPI_MYID",
    "REQ_DATASIZE",
    "PingError",
    "PingPrivilegeError",
    "PingTimeout",
    "PingUnreachable",
    "PingTtlExpired",
    "EchoReply",
    "in_cksum",
    "build_echo_request",
    "parse_echo_reply",
    "ping",
]

ICMP_ECHO_REPLY = 0
ICMP_DEST_UNREACH = 3
ICMP_ECHO_REQUEST = 8
ICMP_TTL_EXPIRE = 11

PINGAPI_MYID = 216
REQ_DATASIZE = 32

_IP_HEADER_SIZE = 20
# type, code, checksum, id, seq, one data byte (packed, host byte order)
_ICMP_HEADER = struct.Struct("<BBHHHB")
_ECHO_REQUEST = struct.Struct("<BBHHHBI32s")
_TIMESTAMP = struct.Struct("<I")
_PAYLOAD = bytes(0x20 + offset for offset in range(REQ_DATASIZE))
_REPLY_BUFFER = _IP_HEADER_SIZE + _ECHO_REQUEST.size + 256
_MIN_REPLY = _IP_HEADER_SIZE + _ICMP_HEADER.size

_sequence = itertools.count(1)


class PingError(OSError):
    """The ping could not be carried out."""


class PingPrivilegeError(PingError, PermissionError):
    """Raw sockets need privileges the process does not have."""


class PingTimeout(PingError, TimeoutError):
    """No echo reply arrived in time."""


class PingUnreachable(PingError):
    """The destination was reported unreachable."""


class PingTtlExpired(PingError):
    """The time to live expired on the way."""


@dataclass(frozen=True)
class EchoReply:
    """The fields of a received ICMP packet and its IP header."""

    type: int
    code: int
    id: int
    seq: int
    ttl: int
    source: str
    timestamp: int | None = None


def in_cksum(data: bytes) -> int:
    """Internet checksum: one's complement of the one's complement sum of 16-bit words.

    Words are read in little-endian order, the same order in which the
    checksum is stored into the packet.
    """
    data = bytes(data)
    even = data[: len(data) & ~1]
    total = sum(struct.unpack(f"<{len(even) // 2}H", even))
    if len(data) & 1:
        total += data[-1]
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return ~total & 0xFFFF


def build_echo_request(seq: int, timestamp: int) -> bytes:
    """Build an echo request carrying ``seq`` and a millisecond ``timestamp``."""
    packet = _ECHO_REQUEST.pack(
        ICMP_ECHO_REQUEST,
        0,
        0,
        PINGAPI_MYID,
        seq & 0xFFFF,
        0,
        timestamp & 0xFFFFFFFF,
        _PAYLOAD,
    )
    checksum = struct.pack("<H", in_cksum(packet))
    return packet[:2] + checksum + packet[4:]


def parse_echo_reply(packet: bytes) -> EchoReply:
    """Decode an IP datagram holding an ICMP message, as read from a raw socket."""
    packet = bytes(packet)
    if len(packet) < _MIN_REPLY:
        raise ValueError(f"packet of {len(packet)} bytes is too short")
    icmp_type, code, _checksum, ident, seq, _data = _ICMP_HEADER.unpack_from(
        packet, _IP_HEADER_SIZE
    )
    stamp_at = _IP_HEADER_SIZE + _ICMP_HEADER.size
    timestamp = (
        _TIMESTAMP.unpack_from(packet, stamp_at)[0]
        if len(packet) >= stamp_at + _TIMESTAMP.size
        else None
    )
    return EchoReply(
        type=icmp_type,
        code=code,
        id=ident,
        seq=seq,
        ttl=packet[8],
        source=socket.inet_ntoa(packet[12:16]),
        timestamp=timestamp,
    )


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _setup_error(exc: OSError, what: str) -> PingError:
    if isinstance(exc, PermissionError):
        return PingPrivilegeError(f"{what}: {exc}")
    return PingError(f"{what}: {exc}")


def ping(address: str, timeout_ms: int = 1000, ttl: int | None = None) -> tuple[int, int]:
    """Send one echo request to ``address``.

    Returns the round trip in milliseconds (at least 1) and the TTL of
    the reply.  Failures raise a :class:`PingError` subclass.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except OSError as exc:
        raise _setup_error(exc, "cannot open raw socket") from exc

    with sock:
        if ttl is not None:
            try:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
            except OSError as exc:
                raise _setup_error(exc, "cannot set TTL") from exc

        request = build_echo_request(next(_sequence), _now_ms())
        try:
            sent = sock.sendto(request, (address, 0))
        except OSError as exc:
            raise _setup_error(exc, "cannot send echo request") from exc
        if sent < len(request):
            raise PingError("echo request only partly sent")

        deadline = _now_ms() + timeout_ms
        while (remaining := deadline - _now_ms()) > 0:
            try:
                ready, _, _ = select.select([sock], [], [], remaining / 1000)
            except OSError as exc:
                raise PingError(f"select failed: {exc}") from exc
            if not ready:
                raise PingTimeout(f"no reply from {address}")
            try:
                packet, _ = sock.recvfrom(_REPLY_BUFFER)
            except OSError as exc:
                raise PingError(f"receive failed: {exc}") from exc
            try:
                reply = parse_echo_reply(packet)
            except ValueError:
                continue
            if reply.type == ICMP_DEST_UNREACH:
                raise PingUnreachable(f"{address} unreachable")
            if reply.type == ICMP_TTL_EXPIRE:
                raise PingTtlExpired(f"TTL expired on the way to {address}")
            if reply.type == ICMP_ECHO_REPLY and reply.id == PINGAPI_MYID:
                break
        else:
            raise PingTimeout(f"no reply from {address}")

        now = _now_ms()
        if now > deadline:
            raise PingTimeout(f"no reply from {address}")
        sent_at = reply.timestamp if reply.timestamp is not None else now
        elapsed = (now - sent_at) & 0xFFFFFFFF
        return (elapsed or 1), reply.ttl
"""Small TCP/UDP helpers: listening, connecting, timed receive and length-prefixed frames."""

from __future__ import annotations

import logging
import select
import socket
import struct
from typing import BinaryIO

__all__ = [
    "Tcp4uError",
    "Tcp4uTimeout",
    "SocketClosed",
    "FrameOverflow",
    "BindError",
    "MAX_FRAME",
    "get_listen_socket",
    "tcp_connect",
    "tcp_recv",
    "tcp_send",
    "pp_send",
    "pp_recv",
    "udp_send",
]

_log = logging.getLogger(__name__)

MAX_FRAME = 0x7FFF
_HEADER = struct.Struct("!H")

_UNKNOWN_SERVICE = {
    code
    for code in (getattr(socket, "EAI_SERVICE", None), getattr(socket, "EAI_NONAME", None))
    if code is not None
}
_AI_NUMERICSERV = getattr(socket, "AI_NUMERICSERV", 0)


class Tcp4uError(OSError):
    """A socket operation failed."""


class Tcp4uTimeout(Tcp4uError, TimeoutError):
    """No data arrived before the timeout."""


class SocketClosed(Tcp4uError):
    """The peer closed the connection."""


class FrameOverflow(Tcp4uError):
    """A length-prefixed frame is larger than 0x7FFF bytes."""


class BindError(Tcp4uError):
    """The local address could not be bound."""


def _resolve(host, service, family, port, flags):
    """Resolve ``service``; fall back to the numeric ``port`` if the name is unknown."""
    if service is not None:
        try:
            return socket.getaddrinfo(
                host, service, family, socket.SOCK_STREAM, socket.IPPROTO_TCP, flags
            )
        except socket.gaierror as exc:
            if exc.errno not in _UNKNOWN_SERVICE:
                raise
    return socket.getaddrinfo(
        host,
        port or 0,
        family,
        socket.SOCK_STREAM,
        socket.IPPROTO_TCP,
        flags | _AI_NUMERICSERV,
    )


def get_listen_socket(
    family: int = socket.AF_INET,
    service: str | None = None,
    port: int | None = None,
) -> tuple[socket.socket, int]:
    """Open a listening TCP socket on ``service`` (or ``port``) and return it with its port."""
    infos = _resolve(None, service, family, port, socket.AI_PASSIVE)
    res_family, kind, proto, _, address = infos[0]
    sock = socket.socket(res_family, kind, proto)
    try:
        sock.bind(address)
        sock.listen(1)
    except OSError:
        sock.close()
        raise
    return sock, sock.getsockname()[1]


def tcp_connect(
    host: str | None,
    service: str | None = None,
    family: int = socket.AF_UNSPEC,
    port: int = 0,
) -> socket.socket:
    """Connect to ``host`` on ``service`` (or ``port``) and return the connected socket."""
    infos = _resolve(host, service, family, port, 0)
    res_family, kind, proto, _, address = infos[0]
    sock = socket.socket(res_family, kind, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def tcp_recv(
    sock: socket.socket,
    size: int,
    timeout: float | None = None,
    log_file: BinaryIO | None = None,
) -> bytes:
    """Wait for data and return up to ``size`` bytes.

    ``timeout`` is in seconds; ``None`` waits forever and ``0`` does not wait.
    With ``size`` zero only readiness is checked and ``b""`` is returned.
    """
    try:
        ready, _, _ = select.select([sock], [], [], timeout)
    except OSError as exc:
        _log.debug("select returns error %s", exc)
        raise Tcp4uError(str(exc)) from exc
    if not ready:
        raise Tcp4uTimeout("no data received before timeout")
    if size <= 0:
        return b""
    try:
        data = sock.recv(size)
    except OSError as exc:
        _log.debug("recv returns error %s", exc)
        raise Tcp4uError(str(exc)) from exc
    if not data:
        raise SocketClosed("connection closed by peer")
    if log_file is not None:
        log_file.write(data)
    return data


def tcp_send(sock: socket.socket, data: bytes, log_file: BinaryIO | None = None) -> None:
    """Send all of ``data``."""
    if log_file is not None:
        log_file.write(data)
    try:
        sock.sendall(data)
    except OSError as exc:
        raise Tcp4uError(str(exc)) from exc


def pp_send(sock: socket.socket, data: bytes, log_file: BinaryIO | None = None) -> None:
    """Send ``data`` preceded by its length as a two-byte big-endian integer."""
    payload = bytes(data)
    if len(payload) > MAX_FRAME:
        raise FrameOverflow(f"frame of {len(payload)} bytes exceeds {MAX_FRAME}")
    if log_file is not None:
        log_file.write(payload)
    try:
        sock.sendall(_HEADER.pack(len(payload)) + payload)
    except OSError as exc:
        _log.debug("send returns error %s", exc)
        raise Tcp4uError(str(exc)) from exc


def _recv_exact(sock, count, timeout, log_file) -> bytes:
    chunks = []
    remaining = count
    while remaining > 0:
        chunk = tcp_recv(sock, remaining, timeout, log_file)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def pp_recv(
    sock: socket.socket,
    timeout: float | None = None,
    log_file: BinaryIO | None = None,
) -> bytes:
    """Receive one frame written by :func:`pp_send` and return its payload."""
    (length,) = _HEADER.unpack(_recv_exact(sock, _HEADER.size, timeout, log_file))
    if length > MAX_FRAME:
        raise FrameOverflow(f"announced frame of {length} bytes exceeds {MAX_FRAME}")
    return _recv_exact(sock, length, timeout, log_file)


def udp_send(from_port: int, address: tuple, data: bytes) -> int:
    """Send one datagram to ``address`` from local port ``from_port``; return bytes sent."""
    family = socket.AF_INET6 if ":" in str(address[0]) else socket.AF_INET
    local = ("::", from_port) if family == socket.AF_INET6 else ("", from_port)
    with socket.socket(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        _log.debug("udp_send: port %d may be reused", from_port)
        try:
            sock.bind(local)
        except OSError as exc:
            _log.debug("udp_send bind failed: %s", exc)
            raise BindError(f"cannot bind UDP port {from_port}: {exc}") from exc
        try:
            sent = sock.sendto(data, address)
        except OSError as exc:
            raise Tcp4uError(str(exc)) from exc
        _log.debug("sendto returns %d", sent)
        return sent
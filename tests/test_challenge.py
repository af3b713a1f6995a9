import socket
import threading

import pytest

from tftpkit.challenge import (
    CHALLENGE_SIZE,
    FRAME_SIZE,
    BadAuthentication,
    VersionMismatch,
    exchange_challenge,
    pack_challenge,
    sym_crypt,
    unpack_challenge,
)
from tftpkit.tcp4u import pp_recv, pp_send


def _start_peer(sock, seed, version, key):
    """Run the other side of the exchange in a thread; return (thread, results)."""
    results = {}

    def side():
        try:
            results["value"] = exchange_challenge(sock, seed, version, key)
        except Exception as exc:  # collected for the assertions
            results["value"] = exc

    thread = threading.Thread(target=side)
    thread.start()
    return thread, results


def test_sym_crypt_is_an_involution():
    data = bytes(range(40))
    scrambled = sym_crypt(data, "placeholder")
    assert scrambled != data
    assert sym_crypt(scrambled, "placeholder") == data


def test_sym_crypt_key_position_steps_by_thirteen():
    assert sym_crypt(b"\x00\x00\x00", b"AB") == b"ABA"


def test_sym_crypt_rejects_empty_key():
    with pytest.raises(ValueError):
        sym_crypt(b"abc", "")


def test_frame_size_and_round_trip():
    challenge = bytes(range(CHALLENGE_SIZE))
    frame = pack_challenge(7, challenge)
    assert len(frame) == FRAME_SIZE
    assert unpack_challenge(frame) == (7, challenge)


def test_version_is_little_endian():
    frame = pack_challenge(1, bytes(CHALLENGE_SIZE))
    assert frame[:4] == b"\x01\x00\x00\x00"


def test_pack_rejects_bad_challenge_length():
    with pytest.raises(ValueError):
        pack_challenge(1, b"short")


def test_unpack_rejects_bad_frame_length():
    with pytest.raises(ValueError):
        unpack_challenge(b"\x00" * (FRAME_SIZE - 1))


def test_exchange_succeeds_with_same_key_and_version():
    left, right = socket.socketpair()
    thread, peer = _start_peer(left, 1, 5, "secret")
    try:
        ours = exchange_challenge(right, 2, 5, "secret")
    finally:
        thread.join(timeout=20)
        left.close()
        right.close()
    assert ours == 5
    assert peer["value"] == 5


def test_exchange_fails_with_different_keys():
    left, right = socket.socketpair()
    thread, peer = _start_peer(left, 1, 5, "secret")
    try:
        with pytest.raises(BadAuthentication):
            exchange_challenge(right, 2, 5, "placeholder")
    finally:
        thread.join(timeout=20)
        left.close()
        right.close()
    assert isinstance(peer["value"], BadAuthentication)


def test_exchange_detects_version_mismatch():
    left, right = socket.socketpair()
    thread, peer = _start_peer(left, 1, 3, "secret")
    try:
        with pytest.raises(VersionMismatch) as info:
            exchange_challenge(right, 2, 4, "secret")
    finally:
        thread.join(timeout=20)
        left.close()
        right.close()
    assert info.value.peer_version == 3
    assert isinstance(peer["value"], VersionMismatch)
    assert peer["value"].peer_version == 4


def test_peer_returning_raw_challenge_is_rejected():
    ours, peer = socket.socketpair()
    observed = {}
    peer_challenge = bytes(range(100, 100 + CHALLENGE_SIZE))

    def run_peer():
        version, challenge = unpack_challenge(pp_recv(peer, 5))
        pp_send(peer, pack_challenge(version, peer_challenge))
        _, reply = unpack_challenge(pp_recv(peer, 5))
        observed["reply"] = reply
        # Send our own challenge back without scrambling it.
        pp_send(peer, pack_challenge(version, challenge))

    thread = threading.Thread(target=run_peer)
    thread.start()
    try:
        with pytest.raises(BadAuthentication):
            exchange_challenge(ours, 0, 9, "secret")
    finally:
        thread.join(timeout=20)
        ours.close()
        peer.close()
    assert observed["reply"] == sym_crypt(peer_challenge, "secret")
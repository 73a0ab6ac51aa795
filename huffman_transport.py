# filename: huffman_transport.py
"""Move one encoded frame between two processes over TCP.

Frames travel behind a 4-byte big-endian length prefix so the receiver knows
when it holds the whole thing before decoding starts.
"""

import os
import socket
import struct
from dataclasses import dataclass

from huffman_errors import ConnectionClosed, FrameTooLarge

LENGTH_PREFIX = struct.Struct(">I")


@dataclass(frozen=True)
class TransportConfig:
    host: str = "127.0.0.1"
    port: int = 5000
    timeout: float = 30.0
    max_frame_size: int = 64 * 1024 * 1024

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=environ.get("HUFFMAN_HOST", defaults.host),
            port=int(environ.get("HUFFMAN_PORT", defaults.port)),
            timeout=float(environ.get("HUFFMAN_TIMEOUT", defaults.timeout)),
        )


def _recv_exact(sock, size):
    buf = bytearray()
    while len(buf) < size:
        chunk = sock.recv(min(size - len(buf), 65536))
        if not chunk:
            raise ConnectionClosed(f"connection closed after {len(buf)} of {size} bytes")
        buf += chunk
    return bytes(buf)


def send_frame(sock, frame):
    if len(frame) > 0xFFFFFFFF:
        raise FrameTooLarge(f"frame of {len(frame)} bytes does not fit the length prefix")
    sock.sendall(LENGTH_PREFIX.pack(len(frame)) + frame)


def recv_frame(sock, max_frame_size=TransportConfig.max_frame_size):
    (size,) = LENGTH_PREFIX.unpack(_recv_exact(sock, LENGTH_PREFIX.size))
    if size > max_frame_size:
        raise FrameTooLarge(f"peer announced {size} bytes, limit is {max_frame_size}")
    return _recv_exact(sock, size)


def serve_once(config, on_listening=None):
    """Accept a single client and return the one frame it sends.

    on_listening, when given, is called with the bound (host, port) once the
    socket is listening; with port 0 this is how callers learn the port.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind((config.host, config.port))
        server.listen(1)
        server.settimeout(config.timeout)
        if on_listening is not None:
            on_listening(server.getsockname())

        conn, _ = server.accept()
        with conn:
            conn.settimeout(config.timeout)
            return recv_frame(conn, config.max_frame_size)


def send_to(config, frame):
    with socket.create_connection((config.host, config.port), timeout=config.timeout) as s:
        send_frame(s, frame)

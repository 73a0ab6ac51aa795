import socket
import struct
import threading

import pytest

from huffman_errors import ConnectionClosed, FrameTooLarge
from huffman_service import HuffmanService
from huffman_transport import TransportConfig, recv_frame, send_frame, send_to, serve_once


def test_send_and_receive_over_socketpair():
    a, b = socket.socketpair()
    with a, b:
        frame = HuffmanService().compress(b"over the wire")
        send_frame(a, frame)
        assert recv_frame(b) == frame


def test_empty_frame():
    a, b = socket.socketpair()
    with a, b:
        send_frame(a, b"")
        assert recv_frame(b) == b""


def test_frame_over_limit_rejected():
    a, b = socket.socketpair()
    with a, b:
        send_frame(a, b"x" * 100)
        with pytest.raises(FrameTooLarge):
            recv_frame(b, max_frame_size=10)


def test_connection_closed_mid_frame():
    a, b = socket.socketpair()
    with b:
        with a:
            a.sendall(struct.pack(">I", 50) + b"only part")
        with pytest.raises(ConnectionClosed):
            recv_frame(b)


def test_connection_closed_before_prefix():
    a, b = socket.socketpair()
    with b:
        a.close()
        with pytest.raises(ConnectionClosed):
            recv_frame(b)


def test_config_from_env():
    config = TransportConfig.from_env(
        {"HUFFMAN_HOST": "0.0.0.0", "HUFFMAN_PORT": "6001", "HUFFMAN_TIMEOUT": "2.5"}
    )
    assert config == TransportConfig(host="0.0.0.0", port=6001, timeout=2.5)
    assert TransportConfig.from_env({}) == TransportConfig()


@pytest.mark.timeout(30)
def test_serve_once_and_send_to():
    config = TransportConfig(port=0, timeout=10.0)
    frame = HuffmanService().compress(b"aaabbc" * 1000)
    bound = {}
    ready = threading.Event()
    received = {}

    def on_listening(address):
        bound["port"] = address[1]
        ready.set()

    def server():
        received["frame"] = serve_once(config, on_listening=on_listening)

    t = threading.Thread(target=server)
    t.start()
    assert ready.wait(10)
    send_to(TransportConfig(port=bound["port"], timeout=10.0), frame)
    t.join(10)

    assert received["frame"] == frame
    assert HuffmanService().decompress(received["frame"]) == b"aaabbc" * 1000

# filename: huffman_cli.py

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from huffman_errors import HuffmanError
from huffman_service import HuffmanService
from huffman_transport import TransportConfig, send_to, serve_once

DEFAULT_INPUT = "tekst.txt"
DEFAULT_OUTPUT = "odebrany_tekst.txt"


def run_server(config, output_path, on_listening=None):
    def announce(address):
        print(f"Server listening on {address[0]}:{address[1]}")
        if on_listening is not None:
            on_listening(address)

    frame = serve_once(config, on_listening=announce)
    print(f"Received frame of {len(frame)} bytes")

    data = HuffmanService().decompress(frame)
    Path(output_path).write_bytes(data)
    print(f"Wrote {len(data)} bytes to {output_path}")
    return data


def run_client(config, input_path):
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"input file {input_path} does not exist")

    data = path.read_bytes()
    message = HuffmanService().encode(data)
    frame = message.to_frame()
    send_to(config, frame)
    print(
        f"Sent {len(data)} bytes as {message.payload.bit_length} bits "
        f"({len(frame)} byte frame) to {config.host}:{config.port}"
    )
    return frame


def build_parser():
    parser = argparse.ArgumentParser(
        description="Send a Huffman-compressed file between two processes"
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--server", action="store_true", help="receive one file and decode it")
    mode.add_argument("--client", action="store_true", help="encode a file and send it")
    parser.add_argument("--host", default=None, help="address to bind or connect to")
    parser.add_argument("--port", type=int, default=None, help="TCP port")
    parser.add_argument("--timeout", type=float, default=None, help="socket timeout in seconds")
    parser.add_argument("--input", default=DEFAULT_INPUT, help=f"file to send (default: {DEFAULT_INPUT})")
    parser.add_argument(
        "--output", default=DEFAULT_OUTPUT, help=f"where to write received data (default: {DEFAULT_OUTPUT})"
    )
    return parser


def config_from_args(args, environ=None):
    config = TransportConfig.from_env(environ)
    overrides = {
        name: value
        for name, value in (("host", args.host), ("port", args.port), ("timeout", args.timeout))
        if value is not None
    }
    return replace(config, **overrides)


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        if args.server:
            run_server(config, args.output)
        else:
            run_client(config, args.input)
    except (HuffmanError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

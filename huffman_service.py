# filename: huffman_service.py

import struct
from dataclasses import dataclass

from huffman_bits import pack_bits, unpack_bits
from huffman_codebook import build_decode_tree, parse_codebook, serialize_codebook
from huffman_core import HuffmanLeaf, HuffmanLogic
from huffman_errors import MalformedFrame, TruncatedStream, UnknownCode, UnknownSymbol

PAYLOAD_HEADER = struct.Struct(">II")


@dataclass(frozen=True)
class EncodedPayload:
    data: bytes
    bit_length: int


@dataclass(frozen=True)
class EncodedMessage:
    """A serialized codebook block plus the packed payload it decodes."""

    codebook: bytes
    payload: EncodedPayload

    def to_frame(self):
        header = PAYLOAD_HEADER.pack(self.payload.bit_length, len(self.payload.data))
        return self.codebook + header + self.payload.data

    @classmethod
    def from_frame(cls, frame):
        _, consumed = parse_codebook(frame)
        codebook = bytes(frame[:consumed])

        if len(frame) - consumed < PAYLOAD_HEADER.size:
            raise MalformedFrame("frame ends before the payload header")
        bit_length, byte_length = PAYLOAD_HEADER.unpack_from(frame, consumed)
        start = consumed + PAYLOAD_HEADER.size
        data = bytes(frame[start:start + byte_length])

        if len(data) < byte_length:
            raise MalformedFrame(
                f"payload declares {byte_length} bytes, frame holds {len(data)}"
            )
        if start + byte_length != len(frame):
            raise MalformedFrame(f"{len(frame) - start - byte_length} trailing bytes after payload")
        if bit_length > byte_length * 8:
            raise TruncatedStream(
                f"payload declares {bit_length} bits in {byte_length} bytes"
            )
        if byte_length > (bit_length + 7) // 8:
            raise MalformedFrame(f"{byte_length} payload bytes for {bit_length} bits")

        return cls(codebook, EncodedPayload(data, bit_length))


class HuffmanService:
    def __init__(self):
        self.logic = HuffmanLogic()

    def encode(self, data):
        data = bytes(data)
        tree = self.logic.build_tree(self.logic.count_frequencies(data))
        codes = self.logic.generate_codes(tree)

        try:
            encoded_str = "".join([codes[symbol] for symbol in data])
        except KeyError as exc:
            raise UnknownSymbol(exc.args[0]) from None

        payload = EncodedPayload(pack_bits(encoded_str), len(encoded_str))
        return EncodedMessage(serialize_codebook(codes), payload)

    def decode(self, message):
        codebook, _ = parse_codebook(message.codebook)
        root = build_decode_tree(codebook)
        bits = unpack_bits(message.payload.data, message.payload.bit_length)

        if root is None:
            if bits:
                raise UnknownCode(f"{len(bits)} payload bits but the codebook is empty")
            return b""

        out = bytearray()
        node = root
        for position, bit in enumerate(bits):
            node = node.child(bit)
            if node is None:
                raise UnknownCode(f"bit {position} leads to no symbol")
            if isinstance(node, HuffmanLeaf):
                out.append(node.symbol)
                node = root

        if node is not root:
            raise TruncatedStream("payload ends in the middle of a code")
        return bytes(out)

    def compress(self, data):
        return self.encode(data).to_frame()

    def decompress(self, frame):
        return self.decode(EncodedMessage.from_frame(frame))

    def encode_text(self, text, encoding="utf-8"):
        return self.compress(text.encode(encoding))

    def decode_text(self, frame, encoding="utf-8"):
        return self.decompress(frame).decode(encoding)

# filename: huffman_codebook.py
"""Wire form of a codebook and the decode tree rebuilt from it.

Block layout (big-endian)::

    symbol_count : uint32
    per entry    : symbol uint8, code_bit_length uint8 (1..255),
                   ceil(code_bit_length / 8) code bytes, MSB-first

Frequencies are never sent; the receiver only needs the codes.
"""

import struct

from huffman_bits import pack_bits, unpack_bits
from huffman_core import HuffmanInternal, HuffmanLeaf
from huffman_errors import CodeTooLong, MalformedCodebook, MalformedFrame

COUNT = struct.Struct(">I")
ENTRY_HEADER = struct.Struct(">BB")
MAX_CODE_LENGTH = 255
MAX_SYMBOLS = 256


def serialize_codebook(codebook):
    out = bytearray(COUNT.pack(len(codebook)))
    for symbol, code in sorted(codebook.items()):
        if not 0 <= symbol <= 0xFF:
            raise ValueError(f"symbol {symbol!r} does not fit in one byte")
        if not code:
            raise ValueError(f"symbol {symbol} has an empty code")
        if len(code) > MAX_CODE_LENGTH:
            raise CodeTooLong(
                f"code for symbol {symbol} is {len(code)} bits, limit is {MAX_CODE_LENGTH}"
            )
        out += ENTRY_HEADER.pack(symbol, len(code))
        out += pack_bits(code)
    return bytes(out)


def parse_codebook(buffer, offset=0):
    """Read a codebook block starting at offset.

    Returns (codebook, consumed) where consumed is the number of bytes the
    block occupied.
    """
    start = offset
    if len(buffer) - offset < COUNT.size:
        raise MalformedFrame("buffer ends before the codebook symbol count")
    (symbol_count,) = COUNT.unpack_from(buffer, offset)
    offset += COUNT.size
    if symbol_count > MAX_SYMBOLS:
        raise MalformedCodebook(f"codebook claims {symbol_count} symbols")

    codebook = {}
    for _ in range(symbol_count):
        if len(buffer) - offset < ENTRY_HEADER.size:
            raise MalformedFrame("buffer ends inside a codebook entry")
        symbol, length = ENTRY_HEADER.unpack_from(buffer, offset)
        offset += ENTRY_HEADER.size
        if length == 0:
            raise MalformedCodebook(f"symbol {symbol} has a zero-length code")
        if symbol in codebook:
            raise MalformedCodebook(f"symbol {symbol} appears twice")

        nbytes = (length + 7) // 8
        code_bytes = bytes(buffer[offset:offset + nbytes])
        if len(code_bytes) < nbytes:
            raise MalformedFrame("buffer ends inside a code")
        offset += nbytes
        codebook[symbol] = unpack_bits(code_bytes, length)

    return codebook, offset - start


def build_decode_tree(codebook):
    """Rebuild a decode tree by inserting each code as a root-to-leaf path."""
    if not codebook:
        return None

    root = HuffmanInternal()
    for symbol, code in codebook.items():
        if not code:
            raise MalformedCodebook(f"symbol {symbol} has an empty code")
        node = root
        for bit in code[:-1]:
            nxt = node.child(bit)
            if nxt is None:
                nxt = HuffmanInternal()
                node.set_child(bit, nxt)
            elif isinstance(nxt, HuffmanLeaf):
                raise MalformedCodebook(
                    f"code {code} for symbol {symbol} runs through the leaf of symbol {nxt.symbol}"
                )
            node = nxt

        last = code[-1]
        if node.child(last) is not None:
            raise MalformedCodebook(
                f"code {code} for symbol {symbol} collides with another code"
            )
        node.set_child(last, HuffmanLeaf(symbol))
    return root

# filename: huffman_bits.py

from huffman_errors import TruncatedStream

_BIT_CHARS = frozenset("01")


def pack_bits(bits):
    """Pack a string of '0'/'1' characters MSB-first into bytes.

    Bit i of the stream lands in bit (7 - i % 8) of byte i // 8. The final
    byte is zero-padded, so the caller has to keep len(bits) alongside the
    result to tell padding from data.
    """
    if not bits:
        return b""
    if not _BIT_CHARS.issuperset(bits):
        raise ValueError("bit string may only contain '0' and '1'")

    # Calculate padding needed for byte alignment
    padding = -len(bits) % 8
    bits += "0" * padding

    b = bytearray()
    for i in range(0, len(bits), 8):
        b.append(int(bits[i:i + 8], 2))
    return bytes(b)


def unpack_bits(data, bit_length):
    """Inverse of pack_bits: return exactly bit_length bits from data."""
    if bit_length < 0:
        raise ValueError("bit_length must not be negative")
    if bit_length > len(data) * 8:
        raise TruncatedStream(
            f"{bit_length} bits requested but only {len(data) * 8} available"
        )
    needed = (bit_length + 7) // 8
    return "".join(f"{byte:08b}" for byte in data[:needed])[:bit_length]

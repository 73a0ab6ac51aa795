import struct

import pytest

from huffman_codebook import build_decode_tree, parse_codebook, serialize_codebook
from huffman_core import HuffmanInternal, HuffmanLeaf, HuffmanLogic
from huffman_errors import CodeTooLong, MalformedCodebook, MalformedFrame


def test_serialize_layout():
    block = serialize_codebook({ord("a"): "0", ord("b"): "11", ord("c"): "10"})
    assert block == (
        struct.pack(">I", 3)
        + bytes([ord("a"), 1, 0x00])
        + bytes([ord("b"), 2, 0xC0])
        + bytes([ord("c"), 2, 0x80])
    )


def test_serialize_empty():
    assert serialize_codebook({}) == b"\x00\x00\x00\x00"
    assert parse_codebook(b"\x00\x00\x00\x00") == ({}, 4)


def test_roundtrip_huffman_codebook():
    codes = HuffmanLogic().build_codebook(bytes(range(256)) * 2 + b"zzzzzz")
    block = serialize_codebook(codes)
    parsed, consumed = parse_codebook(block)
    assert parsed == codes
    assert consumed == len(block)


def test_roundtrip_long_code():
    codes = {1: "1" * 255, 2: "0", 3: "1" * 254 + "0"}
    parsed, _ = parse_codebook(serialize_codebook(codes))
    assert parsed == codes


def test_parse_at_offset_ignores_surrounding_bytes():
    block = serialize_codebook({7: "01", 9: "1", 8: "00"})
    parsed, consumed = parse_codebook(b"junk" + block + b"tail", offset=4)
    assert parsed == {7: "01", 9: "1", 8: "00"}
    assert consumed == len(block)


def test_parse_ignores_pad_bits_in_code_bytes():
    block = struct.pack(">I", 2) + bytes([1, 1, 0x7F]) + bytes([2, 1, 0xFF])
    parsed, _ = parse_codebook(block)
    assert parsed == {1: "0", 2: "1"}


def test_serialize_rejects_long_code():
    with pytest.raises(CodeTooLong):
        serialize_codebook({1: "0" * 256})


def test_serialize_rejects_empty_code():
    with pytest.raises(ValueError):
        serialize_codebook({1: ""})


def test_parse_zero_length_code():
    with pytest.raises(MalformedCodebook):
        parse_codebook(struct.pack(">I", 1) + bytes([5, 0]))


def test_parse_duplicate_symbol():
    with pytest.raises(MalformedCodebook):
        parse_codebook(struct.pack(">I", 2) + bytes([5, 1, 0x00, 5, 1, 0x80]))


def test_parse_too_many_symbols():
    with pytest.raises(MalformedCodebook):
        parse_codebook(struct.pack(">I", 257))


@pytest.mark.parametrize("cut", [2, 5, 6])
def test_parse_truncated_block(cut):
    block = serialize_codebook({1: "0", 2: "1"})
    with pytest.raises(MalformedFrame):
        parse_codebook(block[:cut])


def test_build_decode_tree_shape():
    root = build_decode_tree({ord("a"): "0", ord("c"): "10", ord("b"): "11"})
    assert isinstance(root.left, HuffmanLeaf) and root.left.symbol == ord("a")
    assert isinstance(root.right, HuffmanInternal)
    assert root.right.left.symbol == ord("c")
    assert root.right.right.symbol == ord("b")


def test_build_decode_tree_single_symbol():
    root = build_decode_tree({65: "0"})
    assert root.left.symbol == 65
    assert root.right is None


def test_build_decode_tree_empty():
    assert build_decode_tree({}) is None


@pytest.mark.parametrize(
    "codebook",
    [
        {1: "0", 2: "01"},
        {1: "01", 2: "0"},
        {1: "10", 2: "10"},
    ],
)
def test_build_decode_tree_prefix_conflict(codebook):
    with pytest.raises(MalformedCodebook):
        build_decode_tree(codebook)

# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for every failure raised by the coder and its transport."""


class EncodeError(HuffmanError):
    pass


class UnknownSymbol(EncodeError, KeyError):
    """A symbol in the input has no code in the codebook."""

    def __init__(self, symbol):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self):
        return f"symbol {self.symbol!r} has no code in the codebook"


class CodeTooLong(EncodeError):
    pass


class DecodeError(HuffmanError, ValueError):
    pass


class MalformedFrame(DecodeError):
    pass


class MalformedCodebook(DecodeError):
    pass


class TruncatedStream(DecodeError):
    pass


class UnknownCode(DecodeError):
    pass


class TransportError(HuffmanError, ConnectionError):
    pass


class ConnectionClosed(TransportError):
    pass


class FrameTooLarge(TransportError):
    pass

"""Decoding of hexadecimal strings."""

__all__ = ["HexError", "InvalidHexChar", "InvalidHexLength", "from_hex"]


class HexError(ValueError):
    """Base class for hex decoding errors."""


class InvalidHexChar(HexError):
    """A character that is not a hex digit was found."""

    def __init__(self, char: str) -> None:
        super().__init__(f"invalid char in hex: {char}")
        self.char = char


class InvalidHexLength(HexError):
    """The input has an odd number of hex digits."""

    def __init__(self) -> None:
        super().__init__("invalid hex length")


_DIGITS = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def from_hex(text: str) -> bytes:
    """Decode a string of hex digit pairs into bytes."""
    values = []
    for char in text:
        try:
            values.append(_DIGITS[char])
        except KeyError:
            raise InvalidHexChar(char) from None

    if len(values) % 2:
        raise InvalidHexLength()

    return bytes(high * 16 + low for high, low in zip(values[::2], values[1::2]))
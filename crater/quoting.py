"""Splitting of command lines that may hold quoted segments."""

__all__ = ["SplitQuotedError", "split_quoted"]


class SplitQuotedError(ValueError):
    """The input has an unterminated double quote."""

    def __init__(self) -> None:
        super().__init__("unbalanced quotes")


def split_quoted(text: str) -> list[str]:
    """Split on spaces and tabs outside double quotes; backslash escapes a char.

    Consecutive separators yield empty segments.
    """
    segments: list[str] = []
    buffer: list[str] = []
    quoted = False
    escaped = False

    for char in text:
        if escaped:
            buffer.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char in " \t" and not quoted:
            segments.append("".join(buffer))
            buffer = []
        else:
            buffer.append(char)

    if quoted:
        raise SplitQuotedError()

    segments.append("".join(buffer))
    return segments
"""Path normalisation."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PureWindowsPath

__all__ = ["normalize_path", "strip_verbatim_prefix"]

_log = logging.getLogger(__name__)

_VERBATIM = "\\\\?\\"

# A conservative estimate of the longest usable path on Windows, keeping
# 12 characters so files can be created inside a directory of this length.
_MAX_PATH_LEN = 260 - 12


def _split_verbatim(path: str) -> tuple[str, str] | None:
    """Return the plain prefix replacing a verbatim one, and the rest of the path."""
    if not path.startswith(_VERBATIM):
        return None

    body = path[len(_VERBATIM):]
    if body.startswith("UNC\\"):
        raise ValueError(f"verbatim UNC paths are not supported: {path}")

    if (
        len(body) > 2
        and body[0].isascii()
        and body[0].isalpha()
        and body[1] == ":"
        and body[2] == "\\"
    ):
        return f"{body[0].upper()}:\\", body[2:]

    name, sep, rest = body.partition("\\")
    return name, sep + rest


def strip_verbatim_prefix(path: str) -> str | None:
    """Return the plain equivalent of a ``\\\\?\\`` prefix, or None if there is none."""
    split = _split_verbatim(str(path))
    return None if split is None else split[0]


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Canonicalise a path if it exists, dropping the Windows verbatim prefix."""
    original = Path(path)
    try:
        result = original.resolve(strict=True)
    except OSError:
        result = original

    if os.name == "nt":
        split = _split_verbatim(str(result))
        if split is not None:
            prefix, rest = split
            result = Path(str(PureWindowsPath(prefix) / rest))

        if len(str(result)) >= _MAX_PATH_LEN:
            _log.warning("Canonicalized path is too long for Windows: %r", str(result))

    return result
"""Toolchain descriptions and their string form."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ToolchainParseError",
    "DistSource",
    "CISource",
    "Toolchain",
    "encode_filename",
]

# Characters that cannot appear in a filename on Windows, besides controls.
_FILENAME_SPECIAL = frozenset(b'<>:"/\\|?*')


def encode_filename(text: str) -> str:
    """Percent-encode controls, non-ASCII and filename-unsafe characters."""
    return "".join(
        chr(byte) if 0x20 <= byte < 0x7F and byte not in _FILENAME_SPECIAL else f"%{byte:02X}"
        for byte in text.encode("utf-8")
    )


class ToolchainParseError(ValueError):
    """The toolchain string is malformed."""

    @classmethod
    def empty_name(cls) -> ToolchainParseError:
        return cls("empty toolchain name")

    @classmethod
    def invalid_source_name(cls, name: str) -> ToolchainParseError:
        return cls(f"invalid toolchain source name: {name}")

    @classmethod
    def invalid_flag(cls, flag: str) -> ToolchainParseError:
        return cls(f"invalid toolchain flag: {flag}")


@dataclass(frozen=True)
class DistSource:
    """A toolchain from a distribution channel, such as ``stable``."""

    name: str


@dataclass(frozen=True)
class CISource:
    """A toolchain built by CI for a given commit."""

    sha: str
    alt: bool = True


Source = DistSource | CISource


@dataclass(frozen=True)
class Toolchain:
    """A toolchain with optional extra compiler flags."""

    source: Source
    rustflags: str | None = None
    ci_try: bool = False

    @classmethod
    def parse(cls, text: str) -> Toolchain:
        """Parse ``name``, ``master#sha`` or ``try#sha``, followed by ``+key=value`` flags."""
        raw_source, *flags = text.split("+")

        ci_try = False
        source: Source
        if "#" in raw_source:
            source_name, _, sha = raw_source.partition("#")
            if not sha:
                raise ToolchainParseError.empty_name()
            if source_name == "try":
                ci_try = True
            elif source_name != "master":
                raise ToolchainParseError.invalid_source_name(source_name)
            source = CISource(sha=sha, alt=True)
        elif not raw_source:
            raise ToolchainParseError.empty_name()
        else:
            source = DistSource(name=raw_source)

        rustflags = None
        for part in flags:
            if "=" not in part:
                raise ToolchainParseError.invalid_flag(part)
            flag, _, value = part.partition("=")
            if not value:
                raise ToolchainParseError.invalid_flag(flag)
            if flag != "rustflags":
                raise ToolchainParseError.invalid_flag(flag)
            rustflags = value

        return cls(source=source, rustflags=rustflags, ci_try=ci_try)

    def __str__(self) -> str:
        match self.source:
            case DistSource(name=name):
                text = name
            case CISource(sha=sha):
                text = f"try#{sha}" if self.ci_try else f"master#{sha}"
            case other:
                raise TypeError(f"unsupported toolchain source: {other!r}")

        if self.rustflags is not None:
            text += f"+rustflags={self.rustflags}"
        return text

    def to_path_component(self) -> str:
        """Return the string form, safe to use as a file name."""
        return encode_filename(str(self))
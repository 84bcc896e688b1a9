"""Parsing of the commands users send to the bot."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from crater.quoting import split_quoted
from crater.toolchain import Toolchain

__all__ = [
    "CommandParseError",
    "MissingCommand",
    "InvalidArgument",
    "DuplicateKey",
    "UnknownKey",
    "CommandParser",
    "RunArgs",
    "EditArgs",
    "AbortArgs",
    "PingArgs",
    "RetryReportArgs",
    "RetryArgs",
    "ReloadAclArgs",
    "parse_bool",
    "parse_command",
]


class CommandParseError(ValueError):
    """The command sent to the bot is malformed."""


class MissingCommand(CommandParseError):
    """No command was given."""

    def __init__(self) -> None:
        super().__init__("missing command")


class InvalidArgument(CommandParseError):
    """An argument is not of the ``key=value`` form."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"invalid argument: {argument}")
        self.argument = argument


class DuplicateKey(CommandParseError):
    """The same key was given twice."""

    def __init__(self, key: str) -> None:
        super().__init__(f"duplicate key: {key}")
        self.key = key


class UnknownKey(CommandParseError):
    """The key is not accepted by the command."""

    def __init__(self, key: str) -> None:
        super().__init__(f"unknown key: {key}")
        self.key = key


def parse_bool(text: str) -> bool:
    """Parse exactly ``true`` or ``false``."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("provided string was not `true` or `false`")


_I32_RE = re.compile(r"[+-]?[0-9]+")


def _parse_i32(text: str) -> int:
    if not _I32_RE.fullmatch(text):
        raise ValueError(f"invalid digit found in string: {text!r}")
    value = int(text)
    if not -(2**31) <= value < 2**31:
        raise ValueError(f"number too large to fit in target type: {text}")
    return value


def _option(key: str | None = None, parse: Callable[[str], Any] = str) -> Any:
    """An optional argument; ``key`` defaults to the field name with dashes."""
    return field(default=None, metadata={"key": key, "parse": parse})


@dataclass(frozen=True)
class _ExperimentArgs:
    # Mode, crate selection, lint capping and assignee are kept as given and
    # validated where experiments are defined.
    name: str | None = _option()
    start: Toolchain | None = _option(parse=Toolchain.parse)
    end: Toolchain | None = _option(parse=Toolchain.parse)
    mode: str | None = _option()
    crates: str | None = _option()
    cap_lints: str | None = _option("cap-lints")
    priority: int | None = _option("p", _parse_i32)
    ignore_blacklist: bool | None = _option("ignore-blacklist", parse_bool)
    assign: str | None = _option()


@dataclass(frozen=True)
class RunArgs(_ExperimentArgs):
    """Arguments of the ``run`` command."""


@dataclass(frozen=True)
class EditArgs(_ExperimentArgs):
    """Arguments of a command that edits an experiment, the default one."""


@dataclass(frozen=True)
class AbortArgs:
    """Arguments of the ``abort`` command."""

    name: str | None = _option()


@dataclass(frozen=True)
class PingArgs:
    """The ``ping`` command takes no arguments."""


@dataclass(frozen=True)
class RetryReportArgs:
    """Arguments of the ``retry-report`` command."""

    name: str | None = _option()


@dataclass(frozen=True)
class RetryArgs:
    """Arguments of the ``retry`` command."""

    name: str | None = _option()


@dataclass(frozen=True)
class ReloadAclArgs:
    """The ``reload-acl`` command takes no arguments."""


def _field_specs(cls: type) -> dict[str, tuple[str, Callable[[str], Any]]]:
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    specs = {}
    for item in dataclasses.fields(cls):
        key = item.metadata.get("key") or item.name.replace("_", "-")
        specs[key] = (item.name, item.metadata.get("parse", str))
    return specs


class CommandParser:
    """Parses ``command key=value ...`` into the dataclass registered for the command.

    Each field of an argument dataclass defaults to None; its metadata may hold
    ``key`` (the name used on the command line) and ``parse`` (the converter).
    Text that does not start with a known command is parsed with ``default``.
    """

    def __init__(self, default: type, commands: Mapping[str, type]) -> None:
        self._default = default
        self._commands = dict(commands)
        self._specs = {cls: _field_specs(cls) for cls in (default, *self._commands.values())}

    def parse(self, text: str) -> Any:
        """Parse a command line into its arguments object."""
        parts = split_quoted(text)
        if not parts:
            raise MissingCommand()

        cls = self._commands.get(parts[0])
        if cls is None:
            cls, arguments = self._default, parts
        else:
            arguments = parts[1:]
        return self._build(cls, arguments)

    def _build(self, cls: type, arguments: list[str]) -> Any:
        specs = self._specs[cls]
        values: dict[str, Any] = {}
        for part in arguments:
            if not part.strip():
                continue
            key, sep, value = part.partition("=")
            if not sep:
                raise InvalidArgument(part)
            spec = specs.get(key)
            if spec is None:
                raise UnknownKey(key)
            name, parse = spec
            if name in values:
                raise DuplicateKey(key)
            values[name] = parse(value)
        return cls(**values)


_COMMAND_PARSER = CommandParser(
    EditArgs,
    {
        "run": RunArgs,
        "abort": AbortArgs,
        "ping": PingArgs,
        "retry-report": RetryReportArgs,
        "retry": RetryArgs,
        "reload-acl": ReloadAclArgs,
    },
)


def parse_command(text: str) -> Any:
    """Parse a bot command into one of the ``*Args`` objects."""
    return _COMMAND_PARSER.parse(text)
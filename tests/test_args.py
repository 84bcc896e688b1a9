from dataclasses import dataclass, field

import pytest

from crater.quoting import SplitQuotedError
from crater.server.args import (
    AbortArgs,
    CommandParser,
    DuplicateKey,
    EditArgs,
    InvalidArgument,
    PingArgs,
    ReloadAclArgs,
    RetryArgs,
    RetryReportArgs,
    RunArgs,
    UnknownKey,
    parse_bool,
    parse_command,
)
from crater.toolchain import CISource, DistSource, Toolchain, ToolchainParseError


@dataclass(frozen=True)
class FooArgs:
    arg1: int | None = field(default=None, metadata={"key": "arg1", "parse": int})
    arg2: str | None = field(default=None, metadata={"key": "arg2"})


@dataclass(frozen=True)
class BarArgs:
    arg3: str | None = field(default=None, metadata={"key": "arg3"})


@dataclass(frozen=True)
class BazArgs:
    arg4: int | None = field(default=None, metadata={"key": "arg4", "parse": int})


PARSER = CommandParser(BazArgs, {"foo": FooArgs, "bar": BarArgs})


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("foo", FooArgs(arg1=None, arg2=None)),
        ("bar", BarArgs(arg3=None)),
        ("", BazArgs(arg4=None)),
        ("foo arg1=98", FooArgs(arg1=98, arg2=None)),
        ("foo arg2=bar arg1=98", FooArgs(arg1=98, arg2="bar")),
        ("bar  arg3=foo=bar", BarArgs(arg3="foo=bar")),
        ('bar arg3="foo \\" bar"', BarArgs(arg3='foo " bar')),
        ("arg4=42", BazArgs(arg4=42)),
    ],
)
def test_command_parsing(text, expected):
    assert PARSER.parse(text) == expected


def test_duplicate_key():
    with pytest.raises(DuplicateKey) as info:
        PARSER.parse("foo arg1=98 arg1=42")
    assert info.value.key == "arg1"


@pytest.mark.parametrize(("text", "key"), [("bar arg1=98", "arg1"), ("foo arg4=42", "arg4")])
def test_unknown_key(text, key):
    with pytest.raises(UnknownKey) as info:
        PARSER.parse(text)
    assert info.value.key == key


def test_invalid_argument():
    with pytest.raises(InvalidArgument) as info:
        PARSER.parse("foo bar")
    assert info.value.argument == "bar"


def test_unbalanced_quotes_are_rejected():
    with pytest.raises(SplitQuotedError):
        PARSER.parse('foo arg2="bar')


def test_non_dataclass_rejected():
    with pytest.raises(TypeError):
        CommandParser(dict, {})


def test_parse_bool():
    assert parse_bool("true") is True
    assert parse_bool("false") is False
    with pytest.raises(ValueError):
        parse_bool("yes")


def test_run_command():
    args = parse_command(
        "run name=foo start=stable end=try#abc p=5 ignore-blacklist=true "
        "cap-lints=warn mode=check-only crates=demo assign=agent:one"
    )
    assert args == RunArgs(
        name="foo",
        start=Toolchain(DistSource("stable")),
        end=Toolchain(CISource("abc"), ci_try=True),
        mode="check-only",
        crates="demo",
        cap_lints="warn",
        priority=5,
        ignore_blacklist=True,
        assign="agent:one",
    )


def test_default_command_is_edit():
    assert parse_command("name=foo p=-3") == EditArgs(name="foo", priority=-3)
    assert parse_command("") == EditArgs()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("ping", PingArgs()),
        ("abort name=foo", AbortArgs(name="foo")),
        ("retry-report name=foo", RetryReportArgs(name="foo")),
        ("retry", RetryArgs()),
        ("reload-acl", ReloadAclArgs()),
    ],
)
def test_other_commands(text, expected):
    assert parse_command(text) == expected


def test_edit_and_run_are_distinct():
    assert parse_command("run name=x") != parse_command("name=x")


def test_ping_takes_no_arguments():
    with pytest.raises(UnknownKey):
        parse_command("ping name=foo")


@pytest.mark.parametrize("text", ["run p=abc", "run p=4000000000", "run p= 1"])
def test_invalid_priority(text):
    with pytest.raises(ValueError):
        parse_command(text)


def test_invalid_bool():
    with pytest.raises(ValueError):
        parse_command("run ignore-blacklist=yes")


def test_invalid_toolchain():
    with pytest.raises(ToolchainParseError):
        parse_command("run start=foo#abc")
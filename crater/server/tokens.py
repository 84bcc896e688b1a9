"""Secrets and credentials the server reads from its tokens file."""

from __future__ import annotations

import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

__all__ = [
    "TOKENS_PATH",
    "Region",
    "S3Region",
    "CustomRegion",
    "BotTokens",
    "ReportsBucket",
    "Tokens",
]

TOKENS_PATH = "tokens.toml"

# Region used to sign requests sent to custom S3-compatible endpoints.
_CUSTOM_REGION_NAME = "us-east-1"

_KNOWN_REGIONS = frozenset(
    {
        "ap-east-1",
        "ap-northeast-1",
        "ap-northeast-2",
        "ap-northeast-3",
        "ap-south-1",
        "ap-southeast-1",
        "ap-southeast-2",
        "ca-central-1",
        "eu-central-1",
        "eu-west-1",
        "eu-west-2",
        "eu-west-3",
        "eu-north-1",
        "me-south-1",
        "sa-east-1",
        "us-east-1",
        "us-east-2",
        "us-west-1",
        "us-west-2",
        "us-gov-east-1",
        "us-gov-west-1",
        "cn-north-1",
        "cn-northwest-1",
    }
)


def _table(data: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected a table")
    return data


def _field(data: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}` in {where}") from None
    if not isinstance(value, kind):
        raise ValueError(f"invalid type for field `{key}` in {where}")
    return value


def _string_fields(
    cls: type, table: Mapping[str, Any], where: str, skip: frozenset[str] = frozenset()
) -> dict[str, str]:
    """Read the string fields of a dataclass from their kebab-case keys."""
    return {
        item.name: _field(table, item.name.replace("_", "-"), str, where)
        for item in fields(cls)
        if item.name not in skip
    }


class Region(ABC):
    """Where the reports bucket lives."""

    @abstractmethod
    def to_region(self) -> dict[str, str | None]:
        """Return the region name and endpoint URL for an S3 client."""

    @staticmethod
    def from_dict(data: Any) -> Region:
        """Build a region from its ``type``-tagged table."""
        table = _table(data, "region")
        kind = _field(table, "type", str, "region")
        if kind == "s3":
            return S3Region(region=_field(table, "region", str, "region"))
        if kind == "custom":
            return CustomRegion(url=_field(table, "url", str, "region"))
        raise ValueError(f"unknown region type: {kind}")


@dataclass(frozen=True)
class S3Region(Region):
    """A standard AWS region, such as ``us-west-1``."""

    region: str

    def to_region(self) -> dict[str, str | None]:
        name = self.region.lower().replace("_", "-")
        if name not in _KNOWN_REGIONS:
            raise ValueError(f"Not a valid AWS region: {self.region}")
        return {"region_name": name, "endpoint_url": None}


@dataclass(frozen=True)
class CustomRegion(Region):
    """An S3-compatible service at a custom endpoint."""

    url: str

    def to_region(self) -> dict[str, str | None]:
        return {"region_name": _CUSTOM_REGION_NAME, "endpoint_url": self.url}


@dataclass(frozen=True)
class BotTokens:
    """Credentials of the bot on the code hosting service."""

    webhooks_secret: str
    api_token: str

    @classmethod
    def from_dict(cls, data: Any) -> BotTokens:
        table = _table(data, "bot")
        return cls(**_string_fields(cls, table, "bot"))


@dataclass(frozen=True)
class ReportsBucket:
    """The bucket reports are uploaded to."""

    region: Region
    bucket: str
    public_url: str
    access_key: str
    secret_key: str

    @classmethod
    def from_dict(cls, data: Any) -> ReportsBucket:
        where = "reports-bucket"
        table = _table(data, where)
        region = Region.from_dict(_field(table, "region", Mapping, where))
        values = _string_fields(cls, table, where, skip=frozenset({"region"}))
        return cls(region=region, **values)

    def aws_credentials(self) -> dict[str, str]:
        """Return the static credentials as S3 client keyword arguments."""
        return {
            "aws_access_key_id": self.access_key,
            "aws_secret_access_key": self.secret_key,
        }


@dataclass(frozen=True)
class Tokens:
    """All the secrets of the server."""

    bot: BotTokens
    reports_bucket: ReportsBucket
    agents: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Tokens:
        """Build the tokens from a parsed document."""
        table = _table(data, "tokens")
        agents = _field(table, "agents", Mapping, "tokens")
        for token, name in agents.items():
            if not isinstance(name, str):
                raise ValueError(f"invalid agent name for token {token!r}")
        return cls(
            bot=BotTokens.from_dict(_field(table, "bot", Mapping, "tokens")),
            reports_bucket=ReportsBucket.from_dict(
                _field(table, "reports-bucket", Mapping, "tokens")
            ),
            agents=dict(agents),
        )

    @classmethod
    def from_toml(cls, text: str) -> Tokens:
        """Parse the tokens from TOML text."""
        return cls.from_dict(tomllib.loads(text))

    @classmethod
    def load(cls, path: str | Path = TOKENS_PATH) -> Tokens:
        """Read and parse the tokens file."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as err:
            raise OSError(f"could not find {path}") from err
        return cls.from_toml(content)
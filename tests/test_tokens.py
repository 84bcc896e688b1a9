import pytest

from crater.server.tokens import (
    BotTokens,
    CustomRegion,
    Region,
    ReportsBucket,
    S3Region,
    Tokens,
)

SAMPLE = """
[bot]
webhooks-secret = "secret"
api-token = "token"

[reports-bucket]
bucket = "reports"
public-url = "https://{bucket}.example.com"
access-key = "placeholder"
secret-key = "secret"

[reports-bucket.region]
type = "custom"
url = "http://localhost:9000"

[agents]
token = "agent-1"
"""


def test_from_toml_reads_every_field():
    tokens = Tokens.from_toml(SAMPLE)
    assert tokens.bot == BotTokens(webhooks_secret="secret", api_token="token")
    assert tokens.reports_bucket == ReportsBucket(
        region=CustomRegion(url="http://localhost:9000"),
        bucket="reports",
        public_url="https://{bucket}.example.com",
        access_key="placeholder",
        secret_key="secret",
    )
    assert tokens.agents == {"token": "agent-1"}


def test_custom_region_signs_as_us_east_1():
    region = CustomRegion(url="http://localhost:9000")
    assert region.to_region() == {
        "region_name": "us-east-1",
        "endpoint_url": "http://localhost:9000",
    }


def test_s3_region_is_parsed():
    assert S3Region(region="us-west-1").to_region() == {
        "region_name": "us-west-1",
        "endpoint_url": None,
    }


def test_invalid_s3_region_is_rejected():
    with pytest.raises(ValueError, match="not-a-region"):
        S3Region(region="not-a-region").to_region()


def test_region_from_dict_s3():
    assert Region.from_dict({"type": "s3", "region": "eu-west-1"}) == S3Region(
        region="eu-west-1"
    )


def test_region_unknown_type():
    with pytest.raises(ValueError):
        Region.from_dict({"type": "ftp", "url": "ftp://localhost"})


def test_aws_credentials():
    bucket = Tokens.from_toml(SAMPLE).reports_bucket
    assert bucket.aws_credentials() == {
        "aws_access_key_id": "placeholder",
        "aws_secret_access_key": "secret",
    }


def test_missing_field_is_an_error():
    broken = SAMPLE.replace('api-token = "token"\n', "")
    with pytest.raises(ValueError, match="api-token"):
        Tokens.from_toml(broken)


def test_wrong_type_is_an_error():
    broken = SAMPLE.replace('bucket = "reports"', "bucket = 3")
    with pytest.raises(ValueError, match="bucket"):
        Tokens.from_toml(broken)


def test_invalid_toml_is_an_error():
    with pytest.raises(ValueError):
        Tokens.from_toml("[bot")


def test_load_reads_file(tmp_path):
    path = tmp_path / "tokens.toml"
    path.write_text(SAMPLE, encoding="utf-8")
    assert Tokens.load(path) == Tokens.from_toml(SAMPLE)


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError, match="could not find"):
        Tokens.load(tmp_path / "absent.toml")
import json
from http import HTTPStatus

import pytest

from crater.server.api_types import (
    AgentConfig,
    ApiResponse,
    CraterToken,
    ResponseStatus,
)


def test_success_to_dict():
    assert ApiResponse.success({"a": 1}).to_dict() == {
        "status": "success",
        "result": {"a": 1},
    }


def test_internal_error_to_dict():
    response = ApiResponse.internal_error("boom")
    assert response.to_dict() == {
        "status": ResponseStatus.INTERNAL_ERROR.value,
        "error": "boom",
    }
    assert response.status_code() == HTTPStatus.INTERNAL_SERVER_ERROR


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (ApiResponse.success(True), HTTPStatus.OK),
        (ApiResponse.internal_error("x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (ApiResponse.unauthorized(), HTTPStatus.UNAUTHORIZED),
        (ApiResponse.not_found(), HTTPStatus.NOT_FOUND),
    ],
)
def test_status_codes(response, expected):
    assert response.status_code() == expected
    assert response.into_response().status == expected


def test_into_response_is_compact_json():
    http = ApiResponse.unauthorized().into_response()
    assert http.body == b'{"status":"unauthorized"}'
    assert http.headers["Content-Type"] == "application/json"


@pytest.mark.parametrize(
    "response",
    [
        ApiResponse.success([1, 2, 3]),
        ApiResponse.success(None),
        ApiResponse.internal_error("failure"),
        ApiResponse.not_found(),
    ],
)
def test_body_matches_to_dict(response):
    assert json.loads(response.into_response().body) == response.to_dict()


def test_agent_config_in_success():
    config = AgentConfig(agent_name="agent", crater_config={"demo-crates": {}})
    data = ApiResponse.success(config).to_dict()
    assert data["result"] == {"agent-name": "agent", "crater-config": {"demo-crates": {}}}


def test_nested_to_dict_in_tuple():
    config = AgentConfig(agent_name="a", crater_config={})
    data = ApiResponse.success((config, ["x"])).to_dict()
    assert data["result"] == [config.to_dict(), ["x"]]


def test_crater_token_display_and_parse():
    token = CraterToken.parse("token")
    assert token.token == "token"
    assert str(token) == "CraterToken token"
import pytest
import responses

from crater import httpclient
from crater.httpclient import InvalidStatusCode

URL = "https://api.example.com/resource"


def test_get_returns_ok_response():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json={"ok": True}, status=200)
        resp = httpclient.get(URL)
        sent_agent = rsps.calls[0].request.headers["User-Agent"]
    assert resp.json() == {"ok": True}
    assert sent_agent == httpclient.USER_AGENT


def test_get_non_ok_raises():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body="missing", status=404)
        with pytest.raises(InvalidStatusCode) as exc:
            httpclient.get(URL)
    assert exc.value.status == 404
    assert exc.value.url == URL
    assert str(exc.value) == f"request to {URL} returned status code 404 Not Found"


def test_get_created_is_not_ok():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, status=201)
        with pytest.raises(InvalidStatusCode) as exc:
            httpclient.get(URL)
    assert exc.value.status == 201


def test_request_keeps_caller_headers_and_body():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, URL, status=201)
        resp = httpclient.request(
            "POST", URL, json={"body": "hi"}, headers={"Authorization": "token token"}
        )
        sent = rsps.calls[0].request
    assert resp.status_code == 201
    assert sent.headers["Authorization"] == "token token"
    assert sent.headers["User-Agent"] == httpclient.USER_AGENT
    assert sent.body == b'{"body": "hi"}'
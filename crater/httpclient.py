"""Shared HTTP client with a fixed user agent and redirect limit."""

from __future__ import annotations

import functools
from http import HTTPStatus
from typing import Any

import requests

__all__ = ["MAX_REDIRECTS", "USER_AGENT", "InvalidStatusCode", "request", "get"]

MAX_REDIRECTS = 4
USER_AGENT = "crater"


def _status_text(status: int) -> str:
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


class InvalidStatusCode(Exception):
    """A request returned a status other than 200 OK."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(f"request to {url} returned status code {_status_text(status)}")
        self.url = url
        self.status = status


@functools.cache
def _session() -> requests.Session:
    session = requests.Session()
    session.max_redirects = MAX_REDIRECTS
    return session


def request(method: str, url: str, **kwargs: Any) -> requests.Response:
    """Send a request through the shared session, with the crater user agent."""
    headers = {"User-Agent": USER_AGENT}
    headers.update(kwargs.pop("headers", None) or {})
    return _session().request(method, url, headers=headers, **kwargs)


def get(url: str) -> requests.Response:
    """GET a URL, raising InvalidStatusCode unless the answer is 200 OK."""
    response = request("GET", url)
    if response.status_code != HTTPStatus.OK:
        raise InvalidStatusCode(url, response.status_code)
    return response
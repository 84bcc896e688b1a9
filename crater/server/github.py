"""Client for the code hosting service's REST API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Protocol

import requests

from crater import httpclient

__all__ = [
    "API_BASE",
    "GitHubError",
    "GitHub",
    "User",
    "Label",
    "Team",
    "CommitParent",
    "Commit",
    "PullRequest",
    "Issue",
    "Repository",
    "Comment",
    "EventIssueComment",
    "GitHubApi",
]

API_BASE = "https://api.github.com/"


def _status_text(status: int) -> str:
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


class GitHubError(Exception):
    """An API request answered with an unexpected status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(
            f"request to GitHub API failed with status {_status_text(status)}: {message}"
        )
        self.status = status
        self.message = message


@dataclass(frozen=True)
class User:
    id: int
    login: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(id=data["id"], login=data["login"])


@dataclass(frozen=True)
class Label:
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Label:
        return cls(name=data["name"])


@dataclass(frozen=True)
class Team:
    id: int
    slug: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Team:
        return cls(id=data["id"], slug=data["slug"])


@dataclass(frozen=True)
class CommitParent:
    sha: str


@dataclass(frozen=True)
class Commit:
    sha: str
    parents: list[CommitParent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Commit:
        return cls(
            sha=data["sha"],
            parents=[CommitParent(sha=parent["sha"]) for parent in data["parents"]],
        )


@dataclass(frozen=True)
class PullRequest:
    html_url: str


@dataclass(frozen=True)
class Issue:
    number: int
    url: str
    html_url: str
    labels: list[Label] = field(default_factory=list)
    pull_request: PullRequest | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issue:
        pull_request = data.get("pull_request")
        return cls(
            number=data["number"],
            url=data["url"],
            html_url=data["html_url"],
            labels=[Label.from_dict(label) for label in data["labels"]],
            pull_request=(
                PullRequest(html_url=pull_request["html_url"])
                if pull_request is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Repository:
    full_name: str


@dataclass(frozen=True)
class Comment:
    body: str


@dataclass(frozen=True)
class EventIssueComment:
    action: str
    issue: Issue
    comment: Comment
    sender: User
    repository: Repository

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventIssueComment:
        return cls(
            action=data["action"],
            issue=Issue.from_dict(data["issue"]),
            comment=Comment(body=data["comment"]["body"]),
            sender=User.from_dict(data["sender"]),
            repository=Repository(full_name=data["repository"]["full_name"]),
        )


class GitHub(Protocol):
    """Operations the server needs from the code hosting service."""

    def username(self) -> str: ...

    def post_comment(self, issue_url: str, body: str) -> None: ...

    def list_labels(self, issue_url: str) -> list[Label]: ...

    def add_label(self, issue_url: str, label: str) -> None: ...

    def remove_label(self, issue_url: str, label: str) -> None: ...

    def list_teams(self, org: str) -> dict[str, int]: ...

    def team_members(self, team: int) -> list[str]: ...

    def get_commit(self, repo: str, sha: str) -> Commit: ...


class GitHubApi:
    """The real REST API, authenticated with a bot token."""

    def __init__(self, token: str, api_base: str = API_BASE) -> None:
        self._token = token
        self._api_base = api_base.rstrip("/") + "/"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if not url.startswith("https://"):
            url = f"{self._api_base}{url}"
        headers = {"Authorization": f"token {self._token}"}
        return httpclient.request(method, url, headers=headers, **kwargs)

    @staticmethod
    def _expect(response: requests.Response, status: HTTPStatus) -> None:
        if response.status_code != status:
            raise GitHubError(response.status_code, response.json()["message"])

    def username(self) -> str:
        return User.from_dict(self._request("GET", "user").json()).login

    def post_comment(self, issue_url: str, body: str) -> None:
        response = self._request("POST", f"{issue_url}/comments", json={"body": body})
        self._expect(response, HTTPStatus.CREATED)

    def list_labels(self, issue_url: str) -> list[Label]:
        response = self._request("GET", f"{issue_url}/labels")
        self._expect(response, HTTPStatus.OK)
        return [Label.from_dict(item) for item in response.json()]

    def add_label(self, issue_url: str, label: str) -> None:
        response = self._request("POST", f"{issue_url}/labels", json=[label])
        self._expect(response, HTTPStatus.OK)

    def remove_label(self, issue_url: str, label: str) -> None:
        response = self._request("DELETE", f"{issue_url}/labels/{label}")
        self._expect(response, HTTPStatus.OK)

    def list_teams(self, org: str) -> dict[str, int]:
        response = self._request("GET", f"orgs/{org}/teams")
        self._expect(response, HTTPStatus.OK)
        teams = (Team.from_dict(item) for item in response.json())
        return {team.slug: team.id for team in teams}

    def team_members(self, team: int) -> list[str]:
        response = self._request("GET", f"teams/{team}/members")
        self._expect(response, HTTPStatus.OK)
        return [User.from_dict(item).login for item in response.json()]

    def get_commit(self, repo: str, sha: str) -> Commit:
        response = self._request("GET", f"repos/{repo}/commits/{sha}")
        response.raise_for_status()
        return Commit.from_dict(response.json())
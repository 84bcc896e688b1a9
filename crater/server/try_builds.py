"""Detection of completed try builds announced by the merge bot."""

from __future__ import annotations

import json
import re
import sqlite3
from dataclasses import dataclass

from crater.server.github import GitHub

__all__ = ["TryBuild", "ensure_schema", "base_commit", "detect", "get_sha"]

_HOMU_COMMENT_RE = re.compile(r"<!-- homu: (\{.*\}) -->")


@dataclass(frozen=True)
class TryBuild:
    """The commits of a try build: its base and the merge commit."""

    base_sha: str
    merge_sha: str


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the try builds table if it does not exist."""
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS try_builds ("
            "repo TEXT NOT NULL, "
            "pr INTEGER NOT NULL, "
            "base_sha TEXT NOT NULL, "
            "merge_sha TEXT NOT NULL, "
            "PRIMARY KEY (repo, pr));"
        )


def _completed_merge_sha(comment: str) -> str | None:
    match = _HOMU_COMMENT_RE.search(comment)
    if match is None:
        return None
    try:
        data = json.loads(match[1])
    except ValueError:
        return None
    if not isinstance(data, dict) or data.get("type") != "TryBuildCompleted":
        return None
    merge_sha = data.get("merge_sha")
    return merge_sha if isinstance(merge_sha, str) else None


def base_commit(github: GitHub, repo: str, merge_sha: str) -> str | None:
    """Return the first parent of a merge commit, or None if it is not a merge."""
    commit = github.get_commit(repo, merge_sha)
    if len(commit.parents) != 2:
        return None
    return commit.parents[0].sha


def detect(conn: sqlite3.Connection, github: GitHub, repo: str, pr: int, comment: str) -> None:
    """Record the try build announced in a comment, if there is one."""
    merge_sha = _completed_merge_sha(comment)
    if merge_sha is None:
        return
    base_sha = base_commit(github, repo, merge_sha)
    if base_sha is None:
        return
    with conn:
        conn.execute(
            "INSERT OR REPLACE INTO try_builds (repo, pr, base_sha, merge_sha) "
            "VALUES (?, ?, ?, ?);",
            (repo, pr, base_sha, merge_sha),
        )


def get_sha(conn: sqlite3.Connection, repo: str, pr: int) -> TryBuild | None:
    """Return the last try build recorded for a pull request."""
    row = conn.execute(
        "SELECT base_sha, merge_sha FROM try_builds WHERE repo = ? AND pr = ?;",
        (repo, pr),
    ).fetchone()
    if row is None:
        return None
    return TryBuild(base_sha=row[0], merge_sha=row[1])
"""Registry of the agents running experiments, and their liveness."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

__all__ = ["INACTIVE_AFTER", "AgentStatus", "Agent", "Agents"]

# Time without a heartbeat after which an agent is considered unreachable.
INACTIVE_AFTER = timedelta(seconds=300)


class AgentStatus(Enum):
    WORKING = "working"
    IDLE = "idle"
    UNREACHABLE = "unreachable"


@dataclass
class Agent:
    """An agent, with the experiment assigned to it if any."""

    name: str
    last_heartbeat: datetime | None = None
    git_revision: str | None = None
    experiment: Any = None

    def status(self, now: datetime | None = None) -> AgentStatus:
        """Tell whether the agent is working, idle or unreachable."""
        if now is None:
            now = datetime.now(timezone.utc)
        if self.last_heartbeat is not None and now - INACTIVE_AFTER < self.last_heartbeat:
            return AgentStatus.WORKING if self.experiment is not None else AgentStatus.IDLE
        return AgentStatus.UNREACHABLE


class Agents:
    """Agents stored in the database, kept in sync with the configured tokens."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        agent_names: Iterable[str],
        experiment_lookup: Callable[[str], Any] | None = None,
    ) -> None:
        self._conn = conn
        self._experiment_lookup = experiment_lookup
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS agents ("
                "name TEXT PRIMARY KEY, "
                "last_heartbeat TEXT, "
                "git_revision TEXT);"
            )
        self.synchronize(agent_names)

    def synchronize(self, agent_names: Iterable[str]) -> None:
        """Add agents that are configured and remove those that are not."""
        real = set(agent_names)
        with self._conn:
            stored = {
                row[0] for row in self._conn.execute("SELECT name FROM agents;")
            }
            for name in stored - real:
                self._conn.execute("DELETE FROM agents WHERE name = ?;", (name,))
            for name in sorted(real - stored):
                self._conn.execute("INSERT INTO agents (name) VALUES (?);", (name,))

    def _from_row(self, row: tuple[str, str | None, str | None]) -> Agent:
        name, heartbeat, revision = row
        experiment = (
            self._experiment_lookup(name) if self._experiment_lookup is not None else None
        )
        return Agent(
            name=name,
            last_heartbeat=datetime.fromisoformat(heartbeat) if heartbeat else None,
            git_revision=revision,
            experiment=experiment,
        )

    def all(self) -> list[Agent]:
        """Return every agent, ordered by name."""
        rows = self._conn.execute(
            "SELECT name, last_heartbeat, git_revision FROM agents ORDER BY name;"
        ).fetchall()
        return [self._from_row(row) for row in rows]

    def get(self, name: str) -> Agent | None:
        """Return the agent with this name, or None."""
        row = self._conn.execute(
            "SELECT name, last_heartbeat, git_revision FROM agents WHERE name = ?;",
            (name,),
        ).fetchone()
        return None if row is None else self._from_row(row)

    def _update(self, column: str, value: str, name: str) -> None:
        with self._conn:
            cursor = self._conn.execute(
                f"UPDATE agents SET {column} = ? WHERE name = ?;", (value, name)
            )
        if cursor.rowcount != 1:
            raise LookupError(f"unknown agent: {name}")

    def record_heartbeat(self, name: str) -> None:
        """Store the current time as the agent's last heartbeat."""
        self._update("last_heartbeat", datetime.now(timezone.utc).isoformat(), name)

    def set_git_revision(self, name: str, revision: str) -> None:
        """Store the revision the agent runs."""
        self._update("git_revision", revision, name)
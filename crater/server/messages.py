"""Comments posted by the bot on issues, with optional label changes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from crater.server.github import GitHub

__all__ = ["Label", "LabelSettings", "Message"]


class Label(Enum):
    """Label the bot applies to an issue to show the state of an experiment."""

    EXPERIMENT_QUEUED = "experiment-queued"
    EXPERIMENT_COMPLETED = "experiment-completed"


@dataclass(frozen=True)
class LabelSettings:
    """Names of the labels to apply, and which existing labels to remove."""

    experiment_queued: str
    experiment_completed: str
    remove: re.Pattern[str]

    def __post_init__(self) -> None:
        if isinstance(self.remove, str):
            object.__setattr__(self, "remove", re.compile(self.remove))

    def _name_for(self, label: Label) -> str:
        if label is Label.EXPERIMENT_QUEUED:
            return self.experiment_queued
        return self.experiment_completed


@dataclass(frozen=True)
class _Line:
    emoji: str
    content: str


class Message:
    """A comment made of lines and notes; every builder method returns the message."""

    def __init__(self) -> None:
        self._lines: list[_Line] = []
        self._notes: list[_Line] = []
        self._label: Label | None = None

    def line(self, emoji: str, content: str) -> Message:
        """Add a line to the body."""
        self._lines.append(_Line(emoji, content))
        return self

    def note(self, emoji: str, content: str) -> Message:
        """Add a note at the bottom."""
        self._notes.append(_Line(emoji, content))
        return self

    def set_label(self, label: Label) -> Message:
        """Apply this label when the message is sent."""
        self._label = label
        return self

    def render(self, project_url: str) -> str:
        """Return the comment text, ending with a note explaining what the bot is."""
        notes = [
            *self._notes,
            _Line(
                "information_source",
                "**Crater** is a tool to run experiments across parts of the Rust "
                f"ecosystem. [Learn more]({project_url})",
            ),
        ]
        body = "".join(f":{line.emoji}: {line.content}\n" for line in self._lines)
        return body + "".join(f"\n:{note.emoji}: {note.content}" for note in notes)

    def send(
        self,
        issue_url: str,
        github: GitHub,
        labels: LabelSettings | None,
        project_url: str,
    ) -> None:
        """Post the comment and update the issue labels if a label was set."""
        github.post_comment(issue_url, self.render(project_url))

        if self._label is None:
            return
        if labels is None:
            raise ValueError("label settings are required to apply a label")

        wanted = labels._name_for(self._label)
        already_present = False
        for current in github.list_labels(issue_url):
            if current.name == wanted:
                already_present = True
            elif labels.remove.search(current.name):
                github.remove_label(issue_url, current.name)

        if not already_present:
            github.add_label(issue_url, wanted)
"""Data models for commits and tree-level change lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Tuple


@dataclass(frozen=True)
class Commit:
    """An immutable commit node read from the object store."""

    sha: str
    tree: str
    parents: Tuple[str, ...] = ()
    committer: str = ""
    committer_email: str = ""
    commit_time: int = 0  # seconds since epoch
    message: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:6]

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0]

    @property
    def committed_at(self) -> datetime:
        return datetime.fromtimestamp(self.commit_time, tz=timezone.utc)

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass
class ChangeList:
    """Paths touched between two trees, split by kind of change.

    A renamed file shows up twice: its new name in *added*, its old name
    in *removed*.
    """

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.removed) + len(self.changed)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

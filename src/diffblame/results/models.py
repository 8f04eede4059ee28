"""Diff-blame result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from diffblame.git.models import ChangeList, Commit


@dataclass
class BlameResult:
    """Complete result of a diff-blame run."""

    begin: Commit
    end: Commit
    changes: ChangeList = field(default_factory=ChangeList)
    commits: List[Commit] = field(default_factory=list)  # oldest first
    class_counts: Dict[str, int] = field(default_factory=dict)  # commits kept per file class
    duration_ms: float = 0.0

    @property
    def total_commits(self) -> int:
        return len(self.commits)

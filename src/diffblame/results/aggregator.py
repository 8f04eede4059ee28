"""Merge per-class commit maps and order them for presentation."""

from __future__ import annotations

from typing import Dict, Iterable, List

from diffblame.git.models import Commit


def merge_commits(*maps: Dict[str, Commit]) -> Dict[str, Commit]:
    """Union commit maps by sha; a commit kept by several classes appears once."""
    merged: Dict[str, Commit] = {}
    for commits in maps:
        merged.update(commits)
    return merged


def sort_commits(commits: Iterable[Commit]) -> List[Commit]:
    """Order commits by committer time, oldest first, ties broken by sha."""
    return sorted(commits, key=lambda c: (c.commit_time, c.sha))

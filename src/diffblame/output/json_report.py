"""JSON reporter."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from diffblame.git.models import Commit
from diffblame.results.models import BlameResult


def commit_to_dict(commit: Commit) -> Dict[str, Any]:
    return {
        "sha": commit.sha,
        "short_sha": commit.short_sha,
        "committer": commit.committer,
        "email": commit.committer_email,
        "date": commit.committed_at.isoformat(),
        "summary": commit.summary,
        "parents": list(commit.parents),
    }


def to_dict(result: BlameResult) -> Dict[str, Any]:
    """Convert a BlameResult to a JSON-serialisable dict."""
    commits: List[Dict[str, Any]] = [commit_to_dict(c) for c in result.commits]
    return {
        "version": "1.0",
        "begin": result.begin.sha,
        "end": result.end.sha,
        "files": {
            "added": list(result.changes.added),
            "removed": list(result.changes.removed),
            "changed": list(result.changes.changed),
        },
        "total_commits": result.total_commits,
        "commits": commits,
        "class_counts": dict(result.class_counts),
        "duration_ms": result.duration_ms,
    }


def render(result: BlameResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)

"""Git interface layer: object store adapter, change lists, models."""

from diffblame.git.adapter import (
    AmbiguousRevision,
    GitError,
    HistoryError,
    MissingParentError,
    NotACommit,
    ObjectStore,
    RevisionError,
    RevisionNotFound,
    StoreAccessError,
    get_repo_root,
)
from diffblame.git.changes import compute_change_list
from diffblame.git.models import ChangeList, Commit

__all__ = [
    "AmbiguousRevision",
    "ChangeList",
    "Commit",
    "GitError",
    "HistoryError",
    "MissingParentError",
    "NotACommit",
    "ObjectStore",
    "RevisionError",
    "RevisionNotFound",
    "StoreAccessError",
    "compute_change_list",
    "get_repo_root",
]

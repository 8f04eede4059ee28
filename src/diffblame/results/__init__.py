"""Result model and aggregation."""

from diffblame.results.aggregator import merge_commits, sort_commits
from diffblame.results.models import BlameResult

__all__ = ["BlameResult", "merge_commits", "sort_commits"]

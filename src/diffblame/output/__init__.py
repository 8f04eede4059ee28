"""Reporters for diff-blame results."""

"""diffblame: find the commits behind the differences between two revisions."""

__version__ = "0.3.0"

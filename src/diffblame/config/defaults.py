"""Starter .diffblame.toml template."""

DEFAULT_TOML = """\
# diffblame configuration
version = "1.0"

[diff]
rename_score = 70         # similarity (%) above which a delete + add is a rename
rename_limit = 0          # max rename candidates, 0 = git default
exclude = ["vendor/"]     # path prefixes left out of the change list

[refs]
remote = "origin"         # tried as <remote>/<name> when a name is not a local ref

[output]
format = "terminal"       # terminal | plain | json | yaml
show_summary = true
# sha_length = 6
# name_width = 30
# message_width = 80
# date_format = "%d/%m/%y"
"""

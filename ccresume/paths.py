"""Mapping between working directories and Claude Code log directory names.

Claude Code stores each project's transcripts under
``~/.claude/projects/<dir-name>/`` where ``<dir-name>`` is the project's
absolute path with separators and dots replaced by hyphens.
"""

from __future__ import annotations

import os
import re

_SEPARATOR_OR_DOT = re.compile(r"[\\/.]")


def to_log_dir_name(path: str) -> str:
    """Return the log directory name for *path*.

    ``/home/user/app`` becomes ``-home-user-app``.  Applying it again to the
    result leaves it unchanged.
    """
    return _SEPARATOR_OR_DOT.sub("-", path)


def project_name_from_dir(dir_name: str) -> str:
    """Best-effort inverse of :func:`to_log_dir_name` for display.

    Hyphens that were part of the original path cannot be told apart from
    mapped separators, so ``-home-user-my-app`` reads as
    ``home/user/my/app``.
    """
    if dir_name.startswith("-"):
        dir_name = dir_name[1:]
    return dir_name.replace("-", os.sep)

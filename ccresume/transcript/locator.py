"""Discovery of session log files under the Claude Code projects directory.

Layout::

    <root>/<project-dir-name>/<session-uuid>.jsonl

Only metadata is read here (directory listings and ``stat``); file contents
are left to the reader.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import re
from pathlib import Path
from stat import S_ISDIR, S_ISREG

from .types import FileDescriptor

logger = logging.getLogger(__name__)

LOG_EXTENSION = ".jsonl"

# UUID stem followed by the log extension
_SESSION_FILE_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\.jsonl$",
    re.IGNORECASE,
)


def is_session_file_name(name: str) -> bool:
    return bool(_SESSION_FILE_PATTERN.match(name))


async def list_candidates(
    root: str | os.PathLike[str],
    filter_dir_name: str | None = None,
) -> list[FileDescriptor]:
    """List session log files under *root*, newest first.

    Args:
        root: The projects directory (usually ``~/.claude/projects``).
        filter_dir_name: When given, only ``root/filter_dir_name`` is
            visited; other project directories are never listed.

    Returns:
        FileDescriptors sorted by modification time, descending.  An absent
        *root* yields an empty list.

    Raises:
        OSError: If *root* exists but cannot be listed.
    """
    return await asyncio.to_thread(_scan_candidates, Path(root), filter_dir_name)


async def find_session_file(
    root: str | os.PathLike[str],
    session_id: str,
) -> FileDescriptor | None:
    """Locate the log file for *session_id* in any project directory.

    When the same id exists in several project directories the most
    recently modified file is returned.
    """
    file_name = f"{session_id}{LOG_EXTENSION}"
    if not is_session_file_name(file_name):
        return None
    candidates = await list_candidates(root)
    for descriptor in candidates:
        if os.path.basename(descriptor.path) == file_name:
            return descriptor
    return None


def _scan_candidates(root: Path, filter_dir_name: str | None) -> list[FileDescriptor]:
    if filter_dir_name is not None:
        try:
            st = root.stat()
        except FileNotFoundError:
            return []
        # Only the filtered subdirectory is opened; fail the way listing the root would
        if not S_ISDIR(st.st_mode):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(root))
        if not os.access(root, os.X_OK):
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(root))
        project_dirs = [(filter_dir_name, root / filter_dir_name)]
    else:
        try:
            with os.scandir(root) as entries:
                project_dirs = [
                    (entry.name, Path(entry.path))
                    for entry in entries
                    if _is_dir(entry)
                ]
        except FileNotFoundError:
            return []

    descriptors: list[FileDescriptor] = []
    for dir_name, dir_path in project_dirs:
        descriptors.extend(_scan_project_dir(dir_path, dir_name))

    # Path as secondary key keeps the order stable across calls
    descriptors.sort(key=lambda d: (-d.mtime, d.path))
    return descriptors


def _scan_project_dir(dir_path: Path, dir_name: str) -> list[FileDescriptor]:
    try:
        with os.scandir(dir_path) as entries:
            names = [entry.name for entry in entries if is_session_file_name(entry.name)]
    except FileNotFoundError:
        return []
    except OSError:
        logger.debug("Skipping unreadable project directory: %s", dir_path, exc_info=True)
        return []

    descriptors: list[FileDescriptor] = []
    for name in names:
        path = dir_path / name
        try:
            st = path.stat()
        except OSError:
            # Removed or unreadable between listing and stat
            logger.debug("Failed to stat session file: %s", path, exc_info=True)
            continue
        if not S_ISREG(st.st_mode):
            continue
        descriptors.append(FileDescriptor(path=str(path), project_dir=dir_name, mtime=st.st_mtime))
    return descriptors


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False

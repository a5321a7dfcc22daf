"""Rebuild a Conversation from one session log file."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from ..display.formatter import format_message
from ..paths import project_name_from_dir
from .parser import parse_line, parse_timestamp
from .types import Conversation

logger = logging.getLogger(__name__)

DEFAULT_GIT_BRANCH = "-"


async def read_conversation(
    file_path: str | os.PathLike[str],
    project_dir_name: str,
) -> Conversation | None:
    """Read and reconstruct the conversation stored in *file_path*.

    Returns None when the file cannot be read or holds nothing usable: no
    admissible messages, an unparseable first/last timestamp, or an empty
    session id.  Read failures are logged and never raised.
    """
    path = Path(file_path)
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
    except OSError:
        logger.warning("Failed to read session file: %s", path, exc_info=True)
        return None

    return build_conversation(text, path, project_dir_name)


def build_conversation(text: str, path: Path, project_dir_name: str) -> Conversation | None:
    """Reconstruct a conversation from the full text of a log file."""
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return None

    messages = tuple(m for m in (parse_line(line) for line in lines) if m is not None)
    if not messages:
        return None

    start_time = parse_timestamp(messages[0].timestamp)
    end_time = parse_timestamp(messages[-1].timestamp)
    if start_time is None or end_time is None:
        return None

    # The resume command expects the file stem, not the id inside records
    session_id = path.stem
    if not session_id:
        return None

    user_messages = [m for m in messages if m.is_user]
    try:
        first_message = format_message(user_messages[0]) if user_messages else ""
        last_message = format_message(user_messages[-1]) if user_messages else ""
    except Exception:
        logger.warning("Failed to render messages of session file: %s", path, exc_info=True)
        return None

    return Conversation(
        session_id=session_id,
        project_path=messages[0].cwd,
        project_name=project_name_from_dir(project_dir_name),
        git_branch=_read_git_branch(lines[-1]),
        messages=messages,
        first_message=first_message,
        last_message=last_message,
        start_time=start_time,
        end_time=end_time,
        file_path=str(path),
    )


def _read_git_branch(last_line: str) -> str:
    """Read ``gitBranch`` from the last line of the file, whatever its type."""
    try:
        data = json.loads(last_line)
    except json.JSONDecodeError:
        return DEFAULT_GIT_BRANCH
    if not isinstance(data, dict):
        return DEFAULT_GIT_BRANCH
    branch = data.get("gitBranch")
    if isinstance(branch, str) and branch:
        return branch
    return DEFAULT_GIT_BRANCH

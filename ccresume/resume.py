"""Hand a conversation back to the Claude Code CLI.

Runs ``claude [extra args] --resume <session-id>`` in the conversation's
working directory with the terminal attached, and waits for it to exit.

We use create_subprocess_exec (not a shell) so session ids and user
arguments are passed as plain argv entries.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shlex
from collections.abc import Sequence

from .transcript.types import Conversation

logger = logging.getLogger(__name__)

_SESSION_ID_PATTERN = re.compile(r"^[a-f0-9\-]+$", re.IGNORECASE)


class ResumeError(RuntimeError):
    """The resume command could not be started."""


class ResumeLauncher:
    """Builds and runs the resume command for a conversation."""

    # Set by Claude Code inside its own shells; the child would refuse to start.
    _STRIPPED_ENV_KEYS = frozenset({"CLAUDECODE"})

    def __init__(self, command: str = "claude", extra_args: Sequence[str] = ()) -> None:
        self.command = command
        self.extra_args = list(extra_args)

    def build_args(self, session_id: str) -> list[str]:
        if not _SESSION_ID_PATTERN.match(session_id):
            raise ValueError(f"Invalid session_id format: {session_id!r}")
        return [self.command, *self.extra_args, "--resume", session_id]

    def build_env(self) -> dict[str, str]:
        return {k: v for k, v in os.environ.items() if k not in self._STRIPPED_ENV_KEYS}

    def manual_command(self, session_id: str) -> str:
        """The shell line a user can paste to resume by hand."""
        return shlex.join(self.build_args(session_id))

    def working_dir(self, conversation: Conversation) -> str:
        if conversation.project_path and os.path.isdir(conversation.project_path):
            return conversation.project_path
        logger.info(
            "Project directory %r no longer exists, resuming from %s",
            conversation.project_path,
            os.getcwd(),
        )
        return os.getcwd()

    async def run(self, conversation: Conversation) -> int:
        """Resume *conversation* and return the CLI's exit code.

        Raises:
            ValueError: If the session id is malformed.
            ResumeError: If the command cannot be executed.
        """
        args = self.build_args(conversation.session_id)
        cwd = self.working_dir(conversation)
        logger.info("Resuming session: %s (cwd=%s)", " ".join(args), cwd)

        try:
            process = await asyncio.create_subprocess_exec(*args, cwd=cwd, env=self.build_env())
        except OSError as e:
            raise ResumeError(
                f"Failed to run {self.command!r}: {e}. "
                f"Resume manually with: {self.manual_command(conversation.session_id)}"
            ) from e

        logger.info("Claude CLI started: pid=%s", process.pid)
        return await process.wait()

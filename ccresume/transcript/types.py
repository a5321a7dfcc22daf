"""Typed views over Claude Code transcript records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

UNKNOWN_TOTAL = -1


class BlockKind(str, Enum):
    """Tag of a content block inside ``message.content``."""

    TEXT = "text"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    THINKING = "thinking"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TextBlock:
    text: str
    kind: BlockKind = field(default=BlockKind.TEXT, init=False)


@dataclass(frozen=True)
class ToolUseBlock:
    name: str
    input: dict[str, Any]
    id: str | None = None
    kind: BlockKind = field(default=BlockKind.TOOL_USE, init=False)


@dataclass(frozen=True)
class ToolResultBlock:
    tool_use_id: str | None
    content: Any = None
    is_error: bool = False
    kind: BlockKind = field(default=BlockKind.TOOL_RESULT, init=False)


@dataclass(frozen=True)
class ThinkingBlock:
    thinking: str
    kind: BlockKind = field(default=BlockKind.THINKING, init=False)


@dataclass(frozen=True)
class UnknownBlock:
    """A block whose ``type`` this package does not render (images etc.)."""

    type_name: str
    raw: Any
    kind: BlockKind = field(default=BlockKind.UNKNOWN, init=False)


ContentBlock = TextBlock | ToolUseBlock | ToolResultBlock | ThinkingBlock | UnknownBlock


@dataclass(frozen=True)
class Message:
    """One admissible log record.

    ``raw`` is the decoded JSON object exactly as it appeared on disk; the
    other fields are typed conveniences read from it.
    """

    session_id: str
    timestamp: str
    type: str  # "user" or "assistant"
    cwd: str
    role: str | None
    content: str | tuple[ContentBlock, ...] | None
    tool_use_result: dict[str, Any] | None
    git_branch: str | None
    raw: dict[str, Any]

    @property
    def is_user(self) -> bool:
        return self.type == "user"


@dataclass(frozen=True)
class Conversation:
    """The reconstructed view of one session log file."""

    session_id: str
    project_path: str
    project_name: str
    git_branch: str
    messages: tuple[Message, ...]
    first_message: str
    last_message: str
    start_time: datetime
    end_time: datetime
    file_path: str = ""

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def message_count(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class FileDescriptor:
    """A candidate log file, known only by its metadata."""

    path: str
    project_dir: str
    mtime: float


@dataclass(frozen=True)
class Page:
    """One page of conversations.

    ``total`` is an exact count or :data:`UNKNOWN_TOTAL` when computing it
    would require reading every log file.
    """

    conversations: tuple[Conversation, ...]
    total: int

    def may_have_more(self, limit: int) -> bool:
        """True when a full page came back and the total is not known."""
        return self.total == UNKNOWN_TOTAL and len(self.conversations) >= limit

"""Parser for individual Claude Code transcript lines.

Each line of a session ``.jsonl`` file is one JSON object.  Only records
that carry ``type``, ``message`` and ``timestamp`` become messages; user
records that merely echo a tool result back to the model are dropped.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from .types import (
    BlockKind,
    ContentBlock,
    Message,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
)


def parse_line(line: str) -> Message | None:
    """Parse a single transcript line into a Message.

    Returns None for blank lines, invalid JSON and inadmissible records.
    """
    line = line.strip()
    if not line:
        return None

    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None

    if not is_admissible(data):
        return None

    return _build_message(data)


def is_admissible(data: Any) -> bool:
    """Return True if *data* is a record worth keeping in a conversation."""
    if not isinstance(data, dict):
        return False
    if not data.get("type") or not data.get("timestamp") or data.get("message") is None:
        return False
    return not _is_tool_result_echo(data)


def _is_tool_result_echo(data: dict[str, Any]) -> bool:
    if data.get("type") != "user":
        return False
    message = data.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list) or not content:
        return False
    first = content[0]
    return isinstance(first, dict) and first.get("type") == BlockKind.TOOL_RESULT.value


def parse_content_blocks(content: Any) -> str | tuple[ContentBlock, ...] | None:
    """Convert a raw ``message.content`` value into typed blocks.

    Strings pass through.  Lists become a tuple with one block per element;
    anything that is not a recognised block becomes an UnknownBlock so no
    element is lost.
    """
    if content is None or isinstance(content, str):
        return content
    if not isinstance(content, list):
        return None
    return tuple(_parse_block(item) for item in content)


def _parse_block(item: Any) -> ContentBlock:
    if not isinstance(item, dict):
        return UnknownBlock(type_name=type(item).__name__, raw=item)

    block_type = item.get("type")
    if block_type == BlockKind.TEXT.value:
        return TextBlock(text=_as_str(item.get("text")))
    if block_type == BlockKind.TOOL_USE.value:
        tool_input = item.get("input")
        return ToolUseBlock(
            name=_as_str(item.get("name")),
            input=tool_input if isinstance(tool_input, dict) else {},
            id=item.get("id"),
        )
    if block_type == BlockKind.TOOL_RESULT.value:
        return ToolResultBlock(
            tool_use_id=item.get("tool_use_id"),
            content=item.get("content"),
            is_error=bool(item.get("is_error", False)),
        )
    if block_type == BlockKind.THINKING.value:
        return ThinkingBlock(thinking=_as_str(item.get("thinking")))
    return UnknownBlock(type_name=str(block_type), raw=item)


def _build_message(data: dict[str, Any]) -> Message:
    message = data.get("message")
    body = message if isinstance(message, dict) else {}
    tool_use_result = data.get("toolUseResult")
    git_branch = data.get("gitBranch")

    return Message(
        session_id=_as_str(data.get("sessionId")),
        timestamp=_as_str(data.get("timestamp")),
        type=_as_str(data.get("type")),
        cwd=_as_str(data.get("cwd")),
        role=body.get("role"),
        content=parse_content_blocks(body.get("content")),
        tool_use_result=tool_use_result if isinstance(tool_use_result, dict) else None,
        git_branch=git_branch if isinstance(git_branch, str) else None,
        raw=data,
    )


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

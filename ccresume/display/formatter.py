"""Turn transcript messages into readable text.

Message content is either a plain string or a list of blocks (text,
thinking, tool_use, tool_result).  Tool invocations get a one-line
``[Tool: <name>] ...`` header; a few well-known tools get a richer,
multi-line rendering.  ``toolUseResult`` payloads attached to records are
summarised by :func:`format_tool_result`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any

from ..transcript.parser import parse_timestamp
from ..transcript.types import (
    ContentBlock,
    Conversation,
    Message,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from .width import truncate_to_width

THINKING_MARKER = "[Thinking...]"
TOOL_RESULT_PLACEHOLDER = "[Tool Result]"

# Columns kept from long prompts and JSON dumps in one-line tool summaries
PREVIEW_WIDTH = 100

SUMMARY_WIDTH = 80

# Files listed before "... and N more"
MAX_LISTED_FILES = 5

HIDE_OPTIONS = frozenset({"tool", "thinking", "user", "assistant"})

_TODO_GLYPHS = {"completed": "✓", "in_progress": "→"}
_TODO_PENDING_GLYPH = "○"


def format_message(message: Message, width: int | None = None) -> str:
    """Render a message's content as text.

    Each output line is truncated to *width* cells when *width* is given.
    """
    content = message.content
    if isinstance(content, str):
        text = content
    elif content:
        text = format_blocks(content)
    elif message.tool_use_result is not None:
        text = format_tool_result(message.tool_use_result)
    else:
        text = ""

    if width is None:
        return text
    return "\n".join(truncate_to_width(line, width) for line in text.split("\n"))


def format_blocks(blocks: Iterable[ContentBlock]) -> str:
    parts: list[str] = []
    for block in blocks:
        if isinstance(block, ThinkingBlock):
            thinking = block.thinking.strip()
            parts.append(f"{THINKING_MARKER}\n{thinking}" if thinking else THINKING_MARKER)
        elif isinstance(block, TextBlock):
            if block.text:
                parts.append(block.text)
        elif isinstance(block, ToolUseBlock):
            if block.name:
                parts.append(format_tool_use(block))
        elif isinstance(block, ToolResultBlock):
            parts.append(TOOL_RESULT_PLACEHOLDER)
    return "\n".join(parts)


# --- tool_use ---------------------------------------------------------------


def format_tool_use(block: ToolUseBlock) -> str:
    """Render a tool invocation, starting with ``[Tool: <name>]``."""
    renderer = _TOOL_RENDERERS.get(block.name)
    if renderer is not None:
        return renderer(block.input)

    description = short_description(block.input)
    if description is None:
        description = _json_preview(block.input)
    return _tool_header(block.name, description)


def short_description(tool_input: dict[str, Any]) -> str | None:
    """Pick the most telling input field of an arbitrary tool."""
    command = tool_input.get("command")
    if command:
        return str(command)
    description = tool_input.get("description")
    if description:
        return str(description)
    prompt = tool_input.get("prompt")
    if prompt:
        return truncate_to_width(str(prompt), PREVIEW_WIDTH)
    return None


def _tool_header(name: str, detail: str = "") -> str:
    return f"[Tool: {name}] {detail}" if detail else f"[Tool: {name}]"


def _file_path(data: dict[str, Any]) -> str:
    return data.get("file_path") or data.get("filePath") or "file"


def _old_new(data: dict[str, Any]) -> tuple[str, str]:
    old = data.get("old_string") or data.get("oldString") or ""
    new = data.get("new_string") or data.get("newString") or ""
    return str(old), str(new)


def _render_bash(tool_input: dict[str, Any]) -> str:
    return _tool_header("Bash", str(tool_input.get("command") or tool_input.get("cmd") or ""))


def _render_read(tool_input: dict[str, Any]) -> str:
    line_info = ""
    offset = tool_input.get("offset")
    if isinstance(offset, int) and offset:
        limit = tool_input.get("limit")
        if not isinstance(limit, int) or not limit:
            limit = 50
        line_info = f" (lines {offset}-{offset + limit})"
    return _tool_header("Read", f"{_file_path(tool_input)}{line_info}")


def _render_grep(tool_input: dict[str, Any]) -> str:
    pattern = tool_input.get("pattern") or ""
    where = tool_input.get("glob") or tool_input.get("path") or "."
    return _tool_header("Grep", f'pattern: "{pattern}" in {where}')


def _render_glob(tool_input: dict[str, Any]) -> str:
    return _tool_header("Glob", f'pattern: "{tool_input.get("pattern") or ""}"')


def _render_edit(tool_input: dict[str, Any]) -> str:
    old, new = _old_new(tool_input)
    return f"{_tool_header('Edit', _file_path(tool_input))}\nOld:\n{old}\nNew:\n{new}"


def _render_multi_edit(tool_input: dict[str, Any]) -> str:
    edits = tool_input.get("edits")
    if not isinstance(edits, list):
        edits = []
    rendered = []
    for index, edit in enumerate(edits, start=1):
        old, new = _old_new(edit if isinstance(edit, dict) else {})
        rendered.append(f"Edit {index}:\nOld:\n{old}\nNew:\n{new}")
    header = _tool_header("MultiEdit", _file_path(tool_input))
    return f"{header}\n" + "\n\n".join(rendered) if rendered else header


def _render_todo_write(tool_input: dict[str, Any]) -> str:
    todos = tool_input.get("todos")
    if not isinstance(todos, list) or not todos:
        return _tool_header("TodoWrite")
    lines = [
        f"  {_todo_glyph(todo.get('status'))} {todo.get('content', '')}"
        for todo in todos
        if isinstance(todo, dict)
    ]
    return _tool_header("TodoWrite") + "\n" + "\n".join(lines)


def _todo_glyph(status: Any) -> str:
    if not isinstance(status, str):
        return _TODO_PENDING_GLYPH
    return _TODO_GLYPHS.get(status, _TODO_PENDING_GLYPH)


_TOOL_RENDERERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "Bash": _render_bash,
    "Read": _render_read,
    "Grep": _render_grep,
    "Glob": _render_glob,
    "Edit": _render_edit,
    "MultiEdit": _render_multi_edit,
    "TodoWrite": _render_todo_write,
}


# --- toolUseResult ------------------------------------------------------------


def format_tool_result(result: dict[str, Any]) -> str:
    """Summarise a ``toolUseResult`` payload.

    The first recognised shape wins: todo list changes, file reads, string
    edits, shell output, file listings, then a JSON preview.
    """
    old_todos = result.get("oldTodos")
    new_todos = result.get("newTodos")
    if isinstance(old_todos, list) and isinstance(new_todos, list):
        return f"[TodoWrite Result] {_count_todo_changes(old_todos, new_todos)} todos updated"

    file_info = result.get("file")
    if isinstance(file_info, dict):
        path = file_info.get("filePath") or result.get("filePath") or "file"
        num_lines = file_info.get("numLines") or result.get("numLines") or 0
        return f"[Read Result] {path} ({num_lines} lines)"

    if "oldString" in result and "newString" in result:
        return f"[Edit Result] {result.get('filePath') or 'file'} modified"

    stdout = str(result.get("stdout") or "").strip()
    stderr = str(result.get("stderr") or "").strip()
    if stdout or stderr:
        sections = []
        if stdout:
            sections.append(f"[Bash Output]\n{stdout}")
        if stderr:
            sections.append(f"[Bash Error]\n{stderr}")
        return "\n".join(sections)

    filenames = result.get("filenames")
    if isinstance(filenames, list):
        listed = ", ".join(str(name) for name in filenames[:MAX_LISTED_FILES])
        overflow = len(filenames) - MAX_LISTED_FILES
        more = f" ... and {overflow} more" if overflow > 0 else ""
        return f"[Search Results: {len(filenames)} files] {listed}{more}".rstrip()

    return f"{TOOL_RESULT_PLACEHOLDER} {_json_preview(result)}"


def _count_todo_changes(old_todos: list[Any], new_todos: list[Any]) -> int:
    """Count new todos that were added or whose status/content changed.

    Todos are matched by ``id`` when they carry one, otherwise by position.
    """
    old_by_id = {
        _todo_key(t["id"]): t for t in old_todos if isinstance(t, dict) and "id" in t
    }
    changed = 0
    for index, new in enumerate(new_todos):
        if not isinstance(new, dict):
            continue
        if "id" in new:
            old = old_by_id.get(_todo_key(new["id"]))
        else:
            old = old_todos[index] if index < len(old_todos) else None
        if (
            not isinstance(old, dict)
            or old.get("status") != new.get("status")
            or old.get("content") != new.get("content")
        ):
            changed += 1
    return changed


def _todo_key(todo_id: Any) -> str:
    # ids are usually strings; anything else is compared by its JSON text
    if isinstance(todo_id, str):
        return todo_id
    return json.dumps(todo_id, sort_keys=True, default=str)


def _json_preview(data: Any) -> str:
    return truncate_to_width(json.dumps(data, ensure_ascii=False), PREVIEW_WIDTH)


# --- conversation-level helpers ---------------------------------------------


def format_conversation_summary(conversation: Conversation, width: int = SUMMARY_WIDTH) -> str:
    """One-line preview of the first user message."""
    return truncate_to_width(conversation.first_message.replace("\n", " ").strip(), width)


def is_tool_message(message: Message) -> bool:
    if not message.content and message.tool_use_result is not None:
        return True
    return format_message(message).startswith("[Tool:")


def is_thinking_message(message: Message) -> bool:
    return format_message(message).startswith(THINKING_MARKER)


def filter_messages(messages: Iterable[Message], hide: Iterable[str] = ()) -> list[Message]:
    """Drop the kinds of messages named in *hide*.

    Raises:
        ValueError: For an option outside ``tool``, ``thinking``, ``user``,
            ``assistant``.
    """
    hidden = set(hide)
    unknown = hidden - HIDE_OPTIONS
    if unknown:
        raise ValueError(f"Unknown hide option(s): {', '.join(sorted(unknown))}")

    kept = []
    for message in messages:
        if "user" in hidden and message.type == "user":
            continue
        if "assistant" in hidden and message.type == "assistant":
            continue
        if "tool" in hidden and is_tool_message(message):
            continue
        if "thinking" in hidden and is_thinking_message(message):
            continue
        kept.append(message)
    return kept


def format_transcript_entry(message: Message, width: int | None = None) -> str:
    """Render a message as a ``[User] (HH:MM:SS)`` header plus indented body."""
    role = "User" if message.is_user else "Assistant"
    parsed = parse_timestamp(message.timestamp)
    header = f"[{role}] ({parsed.astimezone():%H:%M:%S})" if parsed else f"[{role}]"
    body_width = width - 2 if width is not None else None
    body = format_message(message, body_width)
    return header + "".join(f"\n  {line}" for line in body.split("\n"))

"""Shared helpers for building fake ~/.claude/projects trees."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

SESSION_A = "aaaaaaaa-1111-2222-3333-444444444444"
SESSION_B = "bbbbbbbb-1111-2222-3333-444444444444"
SESSION_C = "cccccccc-1111-2222-3333-444444444444"


def user_record(text="Fix the login bug", timestamp="2026-02-19T10:00:00.000Z", **extra):
    record = {
        "type": "user",
        "sessionId": extra.pop("sessionId", "in-file-id"),
        "cwd": extra.pop("cwd", "/home/user/app"),
        "timestamp": timestamp,
        "message": {"role": "user", "content": text},
    }
    record.update(extra)
    return record


def assistant_record(content="On it.", timestamp="2026-02-19T10:00:05.000Z", **extra):
    if isinstance(content, str):
        content = [{"type": "text", "text": content}]
    record = {
        "type": "assistant",
        "sessionId": extra.pop("sessionId", "in-file-id"),
        "cwd": extra.pop("cwd", "/home/user/app"),
        "timestamp": timestamp,
        "message": {"role": "assistant", "content": content},
    }
    record.update(extra)
    return record


def write_session_jsonl(path: Path, records: list, mtime: float | None = None) -> Path:
    """Write records (dicts or raw strings) one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            line = record if isinstance(record, str) else json.dumps(record)
            f.write(line + "\n")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def projects_root(tmp_path):
    root = tmp_path / "projects"
    root.mkdir()
    return root

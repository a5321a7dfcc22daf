"""Tests for transcript line parsing."""

import json

from conftest import assistant_record, user_record

from ccresume.transcript.parser import is_admissible, parse_content_blocks, parse_line, parse_timestamp
from ccresume.transcript.types import (
    BlockKind,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
)


class TestParseLine:
    """Test parsing one log line into a Message."""

    def test_empty_line_returns_none(self):
        assert parse_line("") is None
        assert parse_line("  ") is None

    def test_invalid_json_returns_none(self):
        assert parse_line("not json") is None
        assert parse_line('{"type": "user",') is None

    def test_non_object_json_returns_none(self):
        assert parse_line("[1, 2, 3]") is None
        assert parse_line('"user"') is None

    def test_user_string_content(self):
        message = parse_line(json.dumps(user_record("hello")))
        assert message is not None
        assert message.type == "user"
        assert message.is_user
        assert message.content == "hello"
        assert message.cwd == "/home/user/app"
        assert message.role == "user"

    def test_record_is_kept_unchanged_in_raw(self):
        record = assistant_record("Hi", gitBranch="main", uuid="x-1")
        message = parse_line(json.dumps(record))
        assert message is not None
        assert message.raw == record
        assert message.git_branch == "main"

    def test_missing_type_is_dropped(self):
        record = user_record()
        del record["type"]
        assert parse_line(json.dumps(record)) is None

    def test_missing_message_is_dropped(self):
        record = user_record()
        del record["message"]
        assert parse_line(json.dumps(record)) is None

    def test_missing_timestamp_is_dropped(self):
        record = user_record()
        del record["timestamp"]
        assert parse_line(json.dumps(record)) is None

    def test_summary_record_is_dropped(self):
        assert parse_line('{"type": "summary", "summary": "Login fix", "leafUuid": "u"}') is None

    def test_user_tool_result_echo_is_dropped(self):
        record = user_record(
            [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "ok"}],
            toolUseResult={"stdout": "ok"},
        )
        assert parse_line(json.dumps(record)) is None

    def test_tool_result_not_first_is_kept(self):
        record = user_record(
            [
                {"type": "text", "text": "see this"},
                {"type": "tool_result", "tool_use_id": "toolu_1"},
            ]
        )
        assert parse_line(json.dumps(record)) is not None

    def test_assistant_with_tool_result_first_is_kept(self):
        record = assistant_record([{"type": "tool_result", "tool_use_id": "toolu_1"}])
        assert parse_line(json.dumps(record)) is not None

    def test_tool_use_result_payload(self):
        record = assistant_record("x", toolUseResult={"stdout": "done"})
        message = parse_line(json.dumps(record))
        assert message is not None
        assert message.tool_use_result == {"stdout": "done"}

    def test_missing_cwd_defaults_to_empty(self):
        record = user_record()
        del record["cwd"]
        message = parse_line(json.dumps(record))
        assert message is not None
        assert message.cwd == ""


class TestIsAdmissible:
    """Test which records count as messages."""

    def test_empty_message_object_is_admissible(self):
        assert is_admissible({"type": "user", "message": {}, "timestamp": "t"})

    def test_null_message_is_not_admissible(self):
        assert not is_admissible({"type": "user", "message": None, "timestamp": "t"})

    def test_non_dict(self):
        assert not is_admissible(None)
        assert not is_admissible("text")


class TestParseContentBlocks:
    """Test decoding message content into typed blocks."""

    def test_string_passes_through(self):
        assert parse_content_blocks("plain") == "plain"

    def test_none(self):
        assert parse_content_blocks(None) is None

    def test_all_block_kinds(self):
        blocks = parse_content_blocks(
            [
                {"type": "thinking", "thinking": "hmm"},
                {"type": "text", "text": "Hello"},
                {"type": "tool_use", "id": "toolu_1", "name": "Bash", "input": {"command": "ls"}},
                {"type": "tool_result", "tool_use_id": "toolu_1", "is_error": True},
                {"type": "image", "source": {}},
            ]
        )
        assert blocks == (
            ThinkingBlock(thinking="hmm"),
            TextBlock(text="Hello"),
            ToolUseBlock(name="Bash", input={"command": "ls"}, id="toolu_1"),
            ToolResultBlock(tool_use_id="toolu_1", content=None, is_error=True),
            UnknownBlock(type_name="image", raw={"type": "image", "source": {}}),
        )
        assert [b.kind for b in blocks] == [
            BlockKind.THINKING,
            BlockKind.TEXT,
            BlockKind.TOOL_USE,
            BlockKind.TOOL_RESULT,
            BlockKind.UNKNOWN,
        ]

    def test_tool_use_non_dict_input_becomes_empty(self):
        blocks = parse_content_blocks([{"type": "tool_use", "name": "X", "input": "oops"}])
        assert blocks == (ToolUseBlock(name="X", input={}),)

    def test_non_dict_element_is_kept_as_unknown(self):
        blocks = parse_content_blocks(["loose string"])
        assert blocks[0].kind == BlockKind.UNKNOWN


class TestParseTimestamp:
    """Test ISO 8601 timestamp parsing."""

    def test_zulu(self):
        parsed = parse_timestamp("2026-02-19T10:00:00.000Z")
        assert parsed is not None
        assert parsed.utcoffset().total_seconds() == 0
        assert parsed.hour == 10

    def test_naive_is_utc(self):
        parsed = parse_timestamp("2026-02-19T10:00:00")
        assert parsed is not None
        assert parsed.tzinfo is not None

    def test_invalid(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None

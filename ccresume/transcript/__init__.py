"""Discovery, parsing and pagination of Claude Code session logs."""

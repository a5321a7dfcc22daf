"""Text rendering helpers for transcripts."""

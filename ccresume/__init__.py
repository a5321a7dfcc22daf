"""Browse Claude Code conversation logs and resume a session."""

from .paths import to_log_dir_name
from .transcript.pager import find_conversation, iter_conversations, page_conversations
from .transcript.types import UNKNOWN_TOTAL, Conversation, Message, Page

__version__ = "0.3.0"

__all__ = [
    "UNKNOWN_TOTAL",
    "Conversation",
    "Message",
    "Page",
    "find_conversation",
    "iter_conversations",
    "page_conversations",
    "to_log_dir_name",
]

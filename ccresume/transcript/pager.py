"""Lazy, offset-based pagination over session log files.

Candidates are ordered by file modification time alone, so no file has to
be opened to decide the order.  Files are then read one at a time and only
as far as the requested page reaches; files that do not reconstruct into a
conversation are skipped and do not count towards ``offset`` or ``limit``.
Because the walk stops early, the total is reported as
:data:`~ccresume.transcript.types.UNKNOWN_TOTAL`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator

from ..paths import to_log_dir_name
from .locator import find_session_file, list_candidates
from .reader import read_conversation
from .types import UNKNOWN_TOTAL, Conversation, FileDescriptor, Page

logger = logging.getLogger(__name__)


async def iter_conversations(
    root: str | os.PathLike[str],
    dir_filter: str | None = None,
) -> AsyncIterator[Conversation]:
    """Yield conversations under *root*, most recently modified first.

    Args:
        root: The projects directory.
        dir_filter: Absolute working directory to restrict the walk to.

    Files are read strictly one after another.  A session id already
    yielded earlier in the walk is not yielded again.

    Raises:
        OSError: If *root* exists but cannot be listed.
    """
    candidates = await list_candidates(root, _filter_dir_name(dir_filter))
    async for conversation in _reconstruct_each(candidates):
        yield conversation


async def _reconstruct_each(candidates: list[FileDescriptor]) -> AsyncIterator[Conversation]:
    seen: set[str] = set()
    for descriptor in candidates:
        conversation = await read_conversation(descriptor.path, descriptor.project_dir)
        if conversation is None:
            continue
        if conversation.session_id in seen:
            logger.debug(
                "Skipping duplicate session %s in %s", conversation.session_id, descriptor.path
            )
            continue
        seen.add(conversation.session_id)
        yield conversation


async def page_conversations(
    root: str | os.PathLike[str],
    limit: int,
    offset: int = 0,
    dir_filter: str | None = None,
) -> Page:
    """Return up to *limit* conversations after skipping *offset* of them.

    ``total`` is 0 when there is nothing to list at all, otherwise
    UNKNOWN_TOTAL.  A full page (``limit`` items) means more pages may
    exist.

    Raises:
        ValueError: If *limit* is not positive or *offset* is negative.
        OSError: If *root* exists but cannot be listed.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")

    candidates = await list_candidates(root, _filter_dir_name(dir_filter))
    if not candidates:
        return Page(conversations=(), total=0)

    collected: list[Conversation] = []
    skipped = 0
    walk = _reconstruct_each(candidates)
    try:
        async for conversation in walk:
            if skipped < offset:
                skipped += 1
                continue
            collected.append(conversation)
            if len(collected) >= limit:
                break
    finally:
        await walk.aclose()

    return Page(conversations=tuple(collected), total=UNKNOWN_TOTAL)


async def find_conversation(
    root: str | os.PathLike[str],
    session_id: str,
) -> Conversation | None:
    """Reconstruct the conversation with *session_id*, if it exists."""
    descriptor = await find_session_file(root, session_id)
    if descriptor is None:
        return None
    return await read_conversation(descriptor.path, descriptor.project_dir)


def _filter_dir_name(dir_filter: str | None) -> str | None:
    return to_log_dir_name(dir_filter) if dir_filter else None

"""Terminal-width aware truncation.

Widths are measured in terminal cells, so CJK characters and most emoji
count as two columns and combining marks as zero.
"""

from __future__ import annotations

from rich.cells import cell_len, get_character_cell_size

ELLIPSIS = "..."


def truncate_to_width(text: str, width: int, ellipsis: str = ELLIPSIS) -> str:
    """Shorten *text* to at most *width* cells, appending *ellipsis* if cut.

    A wide character is never split, and zero-width characters stay with
    the character they follow.
    """
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text

    budget = width - cell_len(ellipsis)
    if budget <= 0:
        return _take_cells(ellipsis, width)
    return _take_cells(text, budget) + ellipsis


def _take_cells(text: str, budget: int) -> str:
    kept: list[str] = []
    used = 0
    for char in text:
        size = get_character_cell_size(char)
        if size == 0:
            if kept:
                kept.append(char)
            continue
        if used + size > budget:
            break
        kept.append(char)
        used += size
    return "".join(kept)

"""ccresume - browse Claude Code conversations and resume one.

Usage:
    ccresume list                  # conversations started in this directory
    ccresume list --all            # every project, newest first
    ccresume list --offset 30      # next page
    ccresume show <session-id>     # print a transcript
    ccresume resume <session-id> [-- claude args...]
    ccresume keys                  # resolved key bindings
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__, config
from .display.formatter import (
    HIDE_OPTIONS,
    filter_messages,
    format_conversation_summary,
    format_transcript_entry,
)
from .resume import ResumeError, ResumeLauncher
from .transcript.pager import find_conversation, page_conversations
from .transcript.types import Conversation

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def relative_time(moment: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    delta = int((now - moment).total_seconds())
    if delta < 60:
        return "just now"
    if delta < 3600:
        return f"{_plural(delta // 60, 'minute')} ago"
    if delta < 86400:
        return f"{_plural(delta // 3600, 'hour')} ago"
    return f"{_plural(delta // 86400, 'day')} ago"


def _conversation_table(conversations: tuple[Conversation, ...], width: int) -> Table:
    table = Table(title="Claude Code Conversations", padding=(0, 1))
    table.add_column("Session", style="cyan", no_wrap=True)
    table.add_column("Last active", style="dim", no_wrap=True)
    table.add_column("Project", style="green")
    table.add_column("Branch", style="magenta", no_wrap=True)
    table.add_column("Msgs", justify="right")
    table.add_column("First message")
    for conv in conversations:
        table.add_row(
            conv.session_id[:8],
            relative_time(conv.end_time),
            escape(conv.project_path or conv.project_name),
            escape(conv.git_branch),
            str(conv.message_count),
            escape(format_conversation_summary(conv, width)),
        )
    return table


async def _cmd_list(args: argparse.Namespace) -> int:
    dir_filter = None if args.all else os.getcwd()
    page = await page_conversations(
        config.projects_dir(), limit=args.limit, offset=args.offset, dir_filter=dir_filter
    )
    if not page.conversations:
        where = "anywhere" if args.all else f"for {dir_filter}"
        console.print(f"[yellow]No conversations found {escape(where)}.[/]")
        return 0

    console.print(_conversation_table(page.conversations, args.width))
    if page.may_have_more(args.limit):
        console.print(f"[dim]More may exist: ccresume list --offset {args.offset + args.limit}[/]")
    return 0


async def _cmd_show(args: argparse.Namespace) -> int:
    conversation = await find_conversation(config.projects_dir(), args.session_id)
    if conversation is None:
        err_console.print(f"[red]Session {escape(args.session_id)} not found[/]")
        return 1

    hide = [opt for opt in (args.hide or "").split(",") if opt]
    messages = filter_messages(conversation.messages, hide)
    console.print(
        f"[bold]{escape(conversation.session_id)}[/]  "
        f"{escape(conversation.project_path)}  [magenta]{escape(conversation.git_branch)}[/]"
    )
    for message in messages:
        console.print(escape(format_transcript_entry(message, args.width)), highlight=False)
        console.print()
    return 0


async def _cmd_resume(args: argparse.Namespace) -> int:
    conversation = await find_conversation(config.projects_dir(), args.session_id)
    if conversation is None:
        err_console.print(f"[red]Session {escape(args.session_id)} not found[/]")
        return 1

    extra = [a for a in args.claude_args if a != "--"]
    launcher = ResumeLauncher(command=config.claude_command(), extra_args=extra)
    console.print(f"[dim]$ {escape(launcher.manual_command(conversation.session_id))}[/]")
    return await launcher.run(conversation)


async def _cmd_keys(args: argparse.Namespace) -> int:
    table = Table(title=f"Key bindings ({config.config_path()})")
    table.add_column("Action", style="cyan")
    table.add_column("Keys")
    for action, keys in config.load_keybindings().items():
        table.add_row(action, escape(", ".join(keys)))
    console.print(table)
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccresume", description="Browse Claude Code conversations and resume one."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="list conversations, newest first")
    p_list.add_argument("--all", action="store_true", help="include every project")
    p_list.add_argument("--limit", type=_positive_int, default=config.page_size())
    p_list.add_argument("--offset", type=_non_negative_int, default=0)
    p_list.add_argument("--width", type=_positive_int, default=60, help="summary columns")
    p_list.set_defaults(handler=_cmd_list)

    p_show = sub.add_parser("show", help="print a conversation transcript")
    p_show.add_argument("session_id")
    p_show.add_argument(
        "--hide", help=f"comma-separated: {', '.join(sorted(HIDE_OPTIONS))}"
    )
    p_show.add_argument("--width", type=_positive_int, default=None)
    p_show.set_defaults(handler=_cmd_show)

    p_resume = sub.add_parser("resume", help="resume a conversation with the claude CLI")
    p_resume.add_argument("session_id")
    p_resume.add_argument("claude_args", nargs=argparse.REMAINDER)
    p_resume.set_defaults(handler=_cmd_resume)

    p_keys = sub.add_parser("keys", help="show resolved key bindings")
    p_keys.set_defaults(handler=_cmd_keys)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(args.handler(args))
    except (ValueError, OSError, ResumeError) as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        return 1


if __name__ == "__main__":
    sys.exit(main())

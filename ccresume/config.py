"""ccresume configuration.

Settings come from environment variables:

    CCRESUME_PROJECTS_DIR: Where Claude Code keeps session logs.  Defaults
        to ``$CLAUDE_CONFIG_DIR/projects`` or ``~/.claude/projects``.
    CCRESUME_CLAUDE_COMMAND: Executable used to resume a session.
        Defaults to ``claude``.
    CCRESUME_PAGE_SIZE: Conversations per page.  Defaults to 30.
    CCRESUME_LOG_LEVEL: Logging level name.  Defaults to WARNING.

Key bindings for interactive front ends are read from
``$XDG_CONFIG_HOME/ccresume/config.toml``::

    [keybindings]
    quit = ["q", "ctrl+c"]
"""

from __future__ import annotations

import copy
import logging
import os
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_PAGE_SIZE = 30

DEFAULT_KEYBINDINGS: dict[str, list[str]] = {
    "quit": ["q"],
    "selectPrevious": ["up", "k"],
    "selectNext": ["down", "j"],
    "confirm": ["enter", "return"],
    "copySessionId": ["c"],
    "scrollUp": ["k", "ctrl+p"],
    "scrollDown": ["j", "ctrl+n"],
    "scrollPageUp": ["u", "ctrl+u", "pageup"],
    "scrollPageDown": ["d", "ctrl+d", "pagedown"],
    "scrollTop": ["g"],
    "scrollBottom": ["G", "shift+g"],
}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def projects_dir() -> Path:
    """Return the directory holding one subdirectory per project."""
    override = os.getenv("CCRESUME_PROJECTS_DIR")
    if override:
        return Path(override).expanduser()
    claude_dir = os.getenv("CLAUDE_CONFIG_DIR")
    if claude_dir:
        return Path(claude_dir).expanduser() / "projects"
    return Path.home() / ".claude" / "projects"


def claude_command() -> str:
    return os.getenv("CCRESUME_CLAUDE_COMMAND", "claude")


def page_size() -> int:
    size = _env_int("CCRESUME_PAGE_SIZE", _DEFAULT_PAGE_SIZE)
    return size if size > 0 else _DEFAULT_PAGE_SIZE


def log_level() -> str:
    return os.getenv("CCRESUME_LOG_LEVEL", "WARNING").upper()


def config_path() -> Path:
    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "ccresume" / "config.toml"


def load_keybindings(path: Path | None = None) -> dict[str, list[str]]:
    """Return the default key bindings overlaid with the user's config file.

    Only known actions with a non-empty list of strings are taken from the
    file.  A missing file is normal; an unreadable or malformed one is
    logged and ignored.
    """
    bindings = copy.deepcopy(DEFAULT_KEYBINDINGS)
    path = path or config_path()
    if not path.exists():
        return bindings

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Failed to load config from %s", path, exc_info=True)
        return bindings

    user_bindings = data.get("keybindings")
    if not isinstance(user_bindings, dict):
        return bindings

    for action, keys in user_bindings.items():
        if action not in bindings:
            logger.debug("Ignoring unknown key binding action: %s", action)
            continue
        if isinstance(keys, list) and keys and all(isinstance(k, str) for k in keys):
            bindings[action] = list(keys)
    return bindings

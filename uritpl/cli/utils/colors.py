"""
Styled terminal output for the uritpl CLI.

Everything goes through click.style/click.echo, so colours are dropped
automatically when output is not a terminal (pipes, CliRunner, NO_COLOR).
"""

from __future__ import annotations

import shutil
from typing import Iterable, Optional

import click

_RULE = "\u2500"    # ─
_BRANCH = "\u251c"  # ├
_LAST = "\u2514"    # └
_CROSS = "\u2717"   # ✗

_width: Optional[int] = None


def _terminal_width() -> int:
    global _width
    if _width is None:
        _width = max(40, min(shutil.get_terminal_size((80, 24)).columns, 100))
    return _width


def error(message: str) -> None:
    """Red text on stderr."""
    click.echo(click.style(message, fg="red"), err=True)


def section(title: str) -> None:
    """
    Heading followed by a rule up to the terminal width.

        ── Expressions ───────────────────────
    """
    rule = _RULE * max(4, _terminal_width() - len(title) - 4)
    click.echo(click.style(f"{_RULE * 2} {title} {rule}", fg="cyan", bold=True))


def kv(key: str, value: str, width: int = 12) -> None:
    """Indented ``key: value`` line with values aligned at ``width``."""
    label = f"{key}:".ljust(width)
    click.echo(f"  {click.style(label, bold=True)}{click.style(value, fg='cyan')}")


def tree(lines: Iterable[str]) -> None:
    """
    One branch per line, the last one closed off.

        ├── {/path*}
        └── {?q}
    """
    items = list(lines)
    for i, text in enumerate(items):
        joint = _LAST if i == len(items) - 1 else _BRANCH
        click.echo(click.style(f"{joint}{_RULE * 2} ", dim=True) + text)

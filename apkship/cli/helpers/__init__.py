"""CLI helper utilities."""

from .theme import (
    Colors,
    Icons,
    TableStyles,
    ThemedConsole,
    get_themed_console,
)


__all__ = [
    "Colors",
    "Icons",
    "TableStyles",
    "ThemedConsole",
    "get_themed_console",
]

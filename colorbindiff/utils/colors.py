"""Terminal color decoration via colorama."""

import re

from colorama import Fore, Style

from ..config import ADDRESS_COLOR, HEADER_COLOR, KIND_COLORS
from ..records import RecordKind

# Matches the SGR sequences colored() emits
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def colored(text: str, color: str) -> str:
    """Wrap text in the named colorama Fore color and a reset."""
    return getattr(Fore, color) + text + Style.RESET_ALL


def colorize(text: str, kind: RecordKind, enabled: bool = True) -> str:
    """Color text by record kind. Unchanged text is left plain."""
    color = KIND_COLORS.get(kind.value)
    if not enabled or color is None:
        return text
    return colored(text, color)


def address(text: str, enabled: bool = True) -> str:
    return colored(text, ADDRESS_COLOR) if enabled else text


def header(text: str, enabled: bool = True) -> str:
    return colored(text, HEADER_COLOR) if enabled else text


def strip_colors(text: str) -> str:
    """Remove color sequences, leaving the plain text."""
    return _ANSI_RE.sub("", text)

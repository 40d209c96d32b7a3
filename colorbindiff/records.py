"""Alignment records, display cells, and rows.

An AlignmentRecord is one classified unit of the byte-level edit script.
The interpreter turns each record into a CellPair and collects pairs into
Rows, which the renderer turns into output lines.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import BLANK, BLANK_CHAR


class RecordKind(Enum):
    """What the alignment engine says happened to one aligned position."""

    UNCHANGED = "unchanged"
    ADDED = "added"        # only in file2
    DELETED = "deleted"    # only in file1
    MODIFIED = "modified"  # in both, value differs

    @property
    def advances_old(self) -> bool:
        return self is not RecordKind.ADDED

    @property
    def advances_new(self) -> bool:
        return self is not RecordKind.DELETED


_TOKEN_RE = re.compile(r"[0-9A-Fa-f]{2}")


def _check_token(token: str) -> str:
    if not _TOKEN_RE.fullmatch(token):
        raise ValueError(f"Byte token must be 2 hex digits: {token!r}")
    return token.upper()


@dataclass(frozen=True)
class AlignmentRecord:
    """
    One aligned position of the edit script.

    old_token is None for ADDED records, new_token is None for DELETED ones;
    every other combination must carry both tokens.
    """

    kind: RecordKind
    old_token: Optional[str] = None
    new_token: Optional[str] = None

    def __post_init__(self):
        if self.kind.advances_old != (self.old_token is not None):
            raise ValueError(f"{self.kind.value} record has wrong old token: {self.old_token!r}")
        if self.kind.advances_new != (self.new_token is not None):
            raise ValueError(f"{self.kind.value} record has wrong new token: {self.new_token!r}")
        if self.old_token is not None:
            object.__setattr__(self, "old_token", _check_token(self.old_token))
        if self.new_token is not None:
            object.__setattr__(self, "new_token", _check_token(self.new_token))

    @classmethod
    def unchanged(cls, token: str) -> "AlignmentRecord":
        return cls(RecordKind.UNCHANGED, token, token)

    @classmethod
    def modified(cls, old_token: str, new_token: str) -> "AlignmentRecord":
        return cls(RecordKind.MODIFIED, old_token, new_token)

    @classmethod
    def deleted(cls, old_token: str) -> "AlignmentRecord":
        return cls(RecordKind.DELETED, old_token, None)

    @classmethod
    def added(cls, new_token: str) -> "AlignmentRecord":
        return cls(RecordKind.ADDED, None, new_token)


def to_printable(byte: int) -> str:
    """Printable ASCII character for a byte value, or '.'."""
    if 0x20 <= byte <= 0x7E:
        return chr(byte)
    return "."


@dataclass(frozen=True)
class Cell:
    """One side of one display column."""

    kind: RecordKind
    byte: Optional[int]  # None for filler

    @classmethod
    def from_token(cls, token: str, kind: RecordKind) -> "Cell":
        return cls(kind, int(token, 16))

    @classmethod
    def filler(cls, kind: RecordKind) -> "Cell":
        return cls(kind, None)

    @property
    def blank(self) -> bool:
        return self.byte is None

    @property
    def hex(self) -> str:
        return BLANK if self.byte is None else f"{self.byte:02X}"

    @property
    def char(self) -> str:
        return BLANK_CHAR if self.byte is None else to_printable(self.byte)


@dataclass(frozen=True)
class CellPair:
    old: Cell
    new: Cell

    @property
    def kind(self) -> RecordKind:
        return self.old.kind

    @classmethod
    def from_record(cls, record: AlignmentRecord) -> "CellPair":
        kind = record.kind
        if kind is RecordKind.ADDED:
            return cls(Cell.filler(kind), Cell.from_token(record.new_token, kind))
        if kind is RecordKind.DELETED:
            return cls(Cell.from_token(record.old_token, kind), Cell.filler(kind))
        return cls(
            Cell.from_token(record.old_token, kind),
            Cell.from_token(record.new_token, kind),
        )


@dataclass
class Row:
    """
    One screen line's worth of cells for both files.

    old_offset/new_offset are the positions in file1/file2 of the first byte
    the row shows for that side.
    """

    old_offset: int
    new_offset: int
    cells: list[CellPair] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def has_change(self) -> bool:
        return any(pair.kind is not RecordKind.UNCHANGED for pair in self.cells)

    def old_bytes(self) -> bytes:
        """Bytes of file1 covered by this row."""
        return bytes(p.old.byte for p in self.cells if not p.old.blank)

    def new_bytes(self) -> bytes:
        """Bytes of file2 covered by this row."""
        return bytes(p.new.byte for p in self.cells if not p.new.blank)

"""
Stage 4: Render

Format rows as side-by-side text lines:

    0x0000*  41 *42  43 ABC  0x0000*  41 *58  43 AXC

Each side is an address with a change indicator, a hex block, and an
optional printable block. Each hex cell is a space, a marker (+ added,
- deleted, * modified, space otherwise or when markers are off) and two
hex digits. Short rows are padded so both sides always have the same
width. Rendering is pure: a RowRenderer keeps no state between rows.
"""

from typing import Optional

from .config import DisplayOptions
from .records import Cell, RecordKind, Row
from .utils import colors

MARKERS = {
    RecordKind.UNCHANGED: " ",
    RecordKind.ADDED: "+",
    RecordKind.DELETED: "-",
    RecordKind.MODIFIED: "*",
}

ADDRESS_LABEL = "OFFSET "
SIDE_SEPARATOR = "  "

# Space, marker slot, two hex digits. The slot stays when markers are off.
CELL_WIDTH = 4


class RowRenderer:
    """Turns completed rows into output lines for one set of DisplayOptions."""

    def __init__(self, options: DisplayOptions):
        self.options = options

    def format_address(self, offset: int, changed: bool) -> str:
        text = f"0x{offset:04X}"
        if not changed:
            return text + " "
        text += "*" if self.options.marker else " "
        return colors.address(text, self.options.color)

    def format_byte(self, cell: Cell) -> str:
        if not self.options.marker or cell.blank:
            mark = " "
        else:
            mark = MARKERS[cell.kind]
        text = " " + mark + cell.hex
        return colors.colorize(text, cell.kind, self.options.color)

    def format_char(self, cell: Cell) -> str:
        return colors.colorize(cell.char, cell.kind, self.options.color)

    def _side(self, offset: int, cells: list[Cell], changed: bool) -> str:
        missing = self.options.cols - len(cells)
        hex_block = "".join(self.format_byte(c) for c in cells) + " " * (CELL_WIDTH * missing)
        if self.options.ascii:
            char_block = "".join(self.format_char(c) for c in cells) + " " * missing
        else:
            char_block = ""
        return self.format_address(offset, changed) + hex_block + " " + char_block

    def render(self, row: Row) -> Optional[str]:
        """
        Render one row, newline included.

        Returns None when there is nothing to show: the row is empty, or it
        has no change and only changed rows are wanted.
        """
        if not row.cells:
            return None
        if len(row.cells) > self.options.cols:
            raise ValueError(f"Row has {len(row.cells)} cells, more than {self.options.cols} columns")
        changed = row.has_change
        if self.options.only_changes and not changed:
            return None

        old = self._side(row.old_offset, [p.old for p in row.cells], changed)
        new = self._side(row.new_offset, [p.new for p in row.cells], changed)
        return old + SIDE_SEPARATOR + new + "\n"

    def render_header(self) -> str:
        """Column header line, newline included."""
        labels = "".join(f"  {i:02X}" for i in range(self.options.cols))
        ascii_space = " " * self.options.cols if self.options.ascii else ""
        line = ADDRESS_LABEL + labels + " " + ascii_space + SIDE_SEPARATOR + ADDRESS_LABEL + labels
        return colors.header(line, self.options.color) + "\n"

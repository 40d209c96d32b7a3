"""
Stage 3: Interpret

Walk the edit script one record at a time and cut it into display rows.

Each side keeps its own byte offset: unchanged and modified records advance
both, deleted records advance only file1, added records only file2. A row is
flushed when:
  - it holds `cols` cells
  - an adding run is followed by a deleted record, or a deleting run by an
    added record
  - an unchanged or modified record follows any adding/deleting run
  - the input ends (partial last row)

The run rules only look at the previous record. Two runs of the same type
never split a row. Flushing an empty row produces nothing.

Output: Row objects, in order, each covering at most `cols` aligned positions
"""

from enum import Enum
from typing import Iterable, Iterator, Optional

from .records import AlignmentRecord, CellPair, RecordKind, Row


class RunState(Enum):
    NONE = "none"
    ADDING = "adding"
    DELETING = "deleting"


def run_state_of(kind: RecordKind) -> RunState:
    """Run type a record of this kind starts or continues."""
    if kind is RecordKind.ADDED:
        return RunState.ADDING
    if kind is RecordKind.DELETED:
        return RunState.DELETING
    return RunState.NONE


def ends_run(previous: RunState, kind: RecordKind) -> bool:
    """
    True if a record of `kind` must start a new row after a `previous` run.

    Adding -> deleted and deleting -> added both cut the row, and so does any
    unchanged/modified record after a run. Same-type runs continue.
    """
    if previous is RunState.NONE:
        return False
    return run_state_of(kind) is not previous


class EditScriptInterpreter:
    """
    Turns AlignmentRecords into Rows.

    Feed records with push() and call finish() once the stream ends, or use
    rows() to do both over an iterable.
    """

    def __init__(self, cols: int):
        if cols < 1:
            raise ValueError(f"cols must be at least 1, got {cols}")
        self.cols = cols
        self._old_ptr = 0
        self._new_ptr = 0
        self._run = RunState.NONE
        self._row = Row(0, 0)

    @property
    def old_offset(self) -> int:
        """Bytes of file1 consumed so far."""
        return self._old_ptr

    @property
    def new_offset(self) -> int:
        """Bytes of file2 consumed so far."""
        return self._new_ptr

    def _flush(self) -> Optional[Row]:
        """Hand off the current row and open a new one at the current offsets."""
        row = self._row
        self._row = Row(self._old_ptr, self._new_ptr)
        if not row.cells:
            return None
        return row

    def push(self, record: AlignmentRecord) -> Optional[Row]:
        """
        Consume one record. Returns the row it completed, if any.

        A cut leaves the new row holding one cell, so a record never
        completes more than one row.
        """
        done = None

        if ends_run(self._run, record.kind):
            done = self._flush()

        self._row.cells.append(CellPair.from_record(record))
        if record.kind.advances_old:
            self._old_ptr += 1
        if record.kind.advances_new:
            self._new_ptr += 1
        self._run = run_state_of(record.kind)

        if len(self._row.cells) == self.cols:
            done = self._flush()

        return done

    def finish(self) -> Optional[Row]:
        """Flush the partial last row, if it has any cells."""
        self._run = RunState.NONE
        return self._flush()

    def rows(self, records: Iterable[AlignmentRecord]) -> Iterator[Row]:
        """Interpret a whole record stream."""
        for record in records:
            row = self.push(record)
            if row is not None:
                yield row
        last = self.finish()
        if last is not None:
            yield last

"""
Stage 2: Align

Align the two hex lists and classify every aligned position as unchanged,
added, deleted or modified.

Engines:
  diff     Run GNU `diff -y` on the hex-list files and parse its side-by-side
           output. Each output line is one aligned byte:
             "41              41"   unchanged
             "41            | 58"   modified
             "41            <"      deleted
             "              > 58"   added
  difflib  difflib.SequenceMatcher over the same token lists. Replaced
           blocks are paired position by position the way `diff -y` pairs
           them, with the longer side's remainder shown as deleted/added.

Output: an iterator of AlignmentRecord, in file order for both sides
"""

import difflib
import re
import subprocess
from pathlib import Path
from typing import Iterator

from .config import DIFF_COMMAND, DIFF_MAX_OK_STATUS, ENGINES
from .records import AlignmentRecord
from .stage1_encode import read_hex_list


class AlignmentEngineError(RuntimeError):
    """The alignment engine could not be run or reported a failure."""


class MalformedAlignmentError(ValueError):
    """An engine output line matches none of the four record shapes."""


_DIFF_LINE_RE = re.compile(
    r"\s*(?P<old>[0-9A-Fa-f]{2})?\s*(?P<mark>[|<>])?\s*(?P<new>[0-9A-Fa-f]{2})?\s*"
)


def parse_diff_line(line: str) -> AlignmentRecord:
    """
    Classify one line of `diff -y` output.

    Raises MalformedAlignmentError for anything that isn't exactly one of the
    four shapes.
    """
    match = _DIFF_LINE_RE.fullmatch(line.rstrip("\r\n"))
    if not match:
        raise MalformedAlignmentError(f"Unrecognized diff line: {line!r}")

    old, mark, new = match.group("old", "mark", "new")

    if mark is None and old and new:
        if old.upper() != new.upper():
            raise MalformedAlignmentError(
                f"Unmarked diff line with different bytes: {line!r}"
            )
        return AlignmentRecord.unchanged(old)
    if mark == "|" and old and new:
        return AlignmentRecord.modified(old, new)
    if mark == "<" and old and not new:
        return AlignmentRecord.deleted(old)
    if mark == ">" and new and not old:
        return AlignmentRecord.added(new)

    raise MalformedAlignmentError(f"Unrecognized diff line: {line!r}")


def run_diff(old_hex: Path, new_hex: Path) -> Iterator[AlignmentRecord]:
    """
    Stream records from `diff -y old_hex new_hex`.

    Raises AlignmentEngineError if diff is missing or exits with trouble
    (status 2). Status 1 only means the inputs differ.
    """
    cmd = [DIFF_COMMAND, "-y", str(old_hex), str(new_hex)]
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise AlignmentEngineError(f"Cannot run {DIFF_COMMAND!r}: {e}") from e

    with proc:
        for line in proc.stdout:
            yield parse_diff_line(line)
        stderr = proc.stderr.read()
        returncode = proc.wait()

    if returncode > DIFF_MAX_OK_STATUS:
        raise AlignmentEngineError(
            f"{DIFF_COMMAND} exited with status {returncode}: {stderr.strip()}"
        )


def _replace_block(old: list[str], new: list[str]) -> Iterator[AlignmentRecord]:
    """Pair a replaced block position by position; leftovers are deleted/added."""
    paired = min(len(old), len(new))
    for o, n in zip(old[:paired], new[:paired]):
        if o == n:
            yield AlignmentRecord.unchanged(o)
        else:
            yield AlignmentRecord.modified(o, n)
    for o in old[paired:]:
        yield AlignmentRecord.deleted(o)
    for n in new[paired:]:
        yield AlignmentRecord.added(n)


def align_tokens(old: list[str], new: list[str]) -> Iterator[AlignmentRecord]:
    """Align two token lists in-process with difflib."""
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for token in old[i1:i2]:
                yield AlignmentRecord.unchanged(token)
        elif tag == "delete":
            for token in old[i1:i2]:
                yield AlignmentRecord.deleted(token)
        elif tag == "insert":
            for token in new[j1:j2]:
                yield AlignmentRecord.added(token)
        elif tag == "replace":
            yield from _replace_block(old[i1:i2], new[j1:j2])
        else:
            raise AlignmentEngineError(f"Unknown difflib opcode: {tag}")


def run_sequence_matcher(old_hex: Path, new_hex: Path) -> Iterator[AlignmentRecord]:
    """Stream records for two hex-list files using difflib."""
    return align_tokens(read_hex_list(old_hex), read_hex_list(new_hex))


# Engine name (see config.ENGINES) -> runner
ENGINE_RUNNERS = {
    "diff": run_diff,
    "difflib": run_sequence_matcher,
}


def align(engine: str, old_hex: Path, new_hex: Path) -> Iterator[AlignmentRecord]:
    """Run the named alignment engine on two hex-list files."""
    if engine not in ENGINES:
        raise ValueError(f"Unknown alignment engine {engine!r}, expected one of {ENGINES}")
    return ENGINE_RUNNERS[engine](old_hex, new_hex)

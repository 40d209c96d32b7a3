"""Run the stages end to end for one pair of files."""

import tempfile
from pathlib import Path
from typing import Iterator, TextIO

from .config import DEFAULT_ENGINE, DisplayOptions
from .stage1_encode import create_hex_list_file
from .stage2_align import align
from .stage3_interpret import EditScriptInterpreter
from .stage4_render import RowRenderer


def compare_files(
    file1: Path,
    file2: Path,
    options: DisplayOptions,
    engine: str = DEFAULT_ENGINE,
    show_progress: bool = False,
) -> Iterator[str]:
    """
    Yield the output lines comparing file1 (old) with file2 (new).

    The header comes first when enabled. Rows are yielded as soon as the
    interpreter completes them. Temporary hex lists are removed when the
    generator finishes or is closed.
    """
    renderer = RowRenderer(options)
    interpreter = EditScriptInterpreter(options.cols)

    with tempfile.TemporaryDirectory(prefix="colorbindiff-") as tmp:
        hex1 = create_hex_list_file(file1, Path(tmp), show_progress)
        hex2 = create_hex_list_file(file2, Path(tmp), show_progress)

        if options.header:
            yield renderer.render_header()

        for row in interpreter.rows(align(engine, hex1, hex2)):
            line = renderer.render(row)
            if line is not None:
                yield line


def write_comparison(
    file1: Path,
    file2: Path,
    out: TextIO,
    options: DisplayOptions,
    engine: str = DEFAULT_ENGINE,
    show_progress: bool = False,
) -> None:
    """Stream the comparison of file1 and file2 to `out`."""
    for line in compare_files(file1, file2, options, engine, show_progress):
        out.write(line)

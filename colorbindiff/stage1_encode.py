"""
Stage 1: Encode

Turn each input file into a hex list: one two-digit uppercase token per
byte, one token per line, in file order. The alignment engines work on these
lists rather than on raw bytes, so a byte is the unit a line diff compares.

Output: a `<name>.hex` file per input, written into a caller-owned directory
"""

from pathlib import Path
from typing import Iterator

from tqdm import tqdm

from .config import BUFSIZE


def iter_tokens(path: Path, show_progress: bool = False) -> Iterator[str]:
    """
    Yield one hex token per byte of the file at `path`.

    Raises OSError if the file can't be opened or read.
    """
    path = Path(path)
    total = path.stat().st_size
    with open(path, "rb") as f, tqdm(
        total=total,
        unit="B",
        unit_scale=True,
        desc=f"Encoding {path.name}",
        disable=not show_progress,
    ) as pbar:
        for chunk in iter(lambda: f.read(BUFSIZE), b""):
            for byte in chunk:
                yield f"{byte:02X}"
            pbar.update(len(chunk))


def read_hex_list(path: Path) -> list[str]:
    """Read a hex-list file back into its tokens."""
    with open(path) as f:
        return [line.strip() for line in f if line.strip()]


def create_hex_list_file(path: Path, directory: Path, show_progress: bool = False) -> Path:
    """
    Write the hex list of `path` into `directory` and return the new file.

    Two inputs with the same file name get distinct output names.
    """
    path = Path(path)
    directory = Path(directory)
    out_path = directory / f"{path.name}.hex"
    suffix = 1
    while out_path.exists():
        suffix += 1
        out_path = directory / f"{path.name}.{suffix}.hex"

    with open(out_path, "w") as out:
        for token in iter_tokens(path, show_progress=show_progress):
            out.write(token + "\n")

    return out_path

"""Display configuration - defaults, constants, and per-run options."""

from dataclasses import dataclass

# Bytes shown per row when --cols is not given
DEFAULT_COLS = 16

# Read size used when encoding input files
BUFSIZE = 64 * 1024  # 64kB

# Hex and printable renderings of the filler cell on the side that has no byte
BLANK = ".."
BLANK_CHAR = "."

# Alignment engines, in the order shown by --help
#   diff:    GNU `diff -y` on the two hex-list files (the reference behavior)
#   difflib: in-process difflib.SequenceMatcher, no external command needed
ENGINES = ["diff", "difflib"]
DEFAULT_ENGINE = "diff"

# Executable used by the diff engine
DIFF_COMMAND = "diff"

# Exit status above which `diff` reports trouble (1 just means "files differ")
DIFF_MAX_OK_STATUS = 1

# Colorama Fore attribute names per record kind. Unchanged cells stay plain.
KIND_COLORS = {
    "added": "LIGHTGREEN_EX",
    "deleted": "LIGHTRED_EX",
    "modified": "LIGHTCYAN_EX",
}

# Address prefix of rows containing a change, and the header line
ADDRESS_COLOR = "LIGHTMAGENTA_EX"
HEADER_COLOR = "MAGENTA"


@dataclass
class DisplayOptions:
    """Per-run rendering toggles, as set on the command line."""

    cols: int = DEFAULT_COLS
    color: bool = True
    marker: bool = True
    ascii: bool = True
    only_changes: bool = False
    header: bool = True

    def __post_init__(self):
        if self.cols < 1:
            raise ValueError(f"cols must be at least 1, got {self.cols}")

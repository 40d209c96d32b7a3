"""Side-by-side colored byte-level diff of two binary files.

Stages:
  1. Encode - one hex token per byte, one per line
  2. Align - classify each aligned byte (diff -y or difflib)
  3. Interpret - cut the edit script into rows, tracking both offsets
  4. Render - format rows as two aligned hex/ascii columns
"""

from .compare import compare_files, write_comparison
from .config import DisplayOptions

__all__ = ["compare_files", "write_comparison", "DisplayOptions"]

"""
Unified test infrastructure for linegate.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the CLI in a subprocess and parsing its JSON output
- processing: Shortcuts for running a processor over text
"""

from .file_utils import write, write_bytes
from .cli_utils import run_cli, jload
from .processing import run, blank_like, CollectingSink

__all__ = [
    # File utilities
    "write", "write_bytes",

    # CLI
    "run_cli", "jload",

    # Processing
    "run", "blank_like", "CollectingSink",
]

"""
File sink.

Appends error reports to a local file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class FileSink:
    """
    Appends reports to a file, creating it if it doesn't exist.

    Each report opens and closes its own handle, so concurrent reports
    may interleave but a single write is never split.
    """

    name = "file"
    failure_verb = "append to file"

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def send(self, content: str) -> None:
        """
        Append the content's UTF-8 bytes to the file.

        Surrogate-escaped characters, as found in undecodable paths, are
        written back as their original bytes.

        Raises:
            OSError: If the file could not be opened or written.
        """
        with open(self.path, "ab") as f:
            f.write(content.encode("utf-8", errors="surrogateescape"))

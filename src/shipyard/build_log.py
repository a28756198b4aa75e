"""Human-readable build log.

This is the console the host build system shows to operators. Notices
are framed in a banner so they stand out between pages of mvn/docker
output; process output lines are passed through untouched.
"""

from __future__ import annotations

import sys
from typing import TextIO


class BuildLog:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def notice(self, template: str, *args: object) -> None:
        """Write a banner-framed notice, ``%``-formatted with *args*."""
        content = template % args if args else template
        wrapped = f"|| {content} ||"
        rule = "=" * len(wrapped)
        self._stream.write(f"\n{rule}\n{wrapped}\n{rule}\n")
        self._stream.flush()

    def line(self, text: str) -> None:
        """Write one raw line (process output, file contents)."""
        self._stream.write(text if text.endswith("\n") else text + "\n")
        self._stream.flush()

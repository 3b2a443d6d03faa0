import logging
import os
from io import StringIO
from typing import TextIO

from datadriven._private.util import has_blank_line

logger = logging.getLogger(__file__)

SEPARATOR = "----"


class RewriteBuffer:
    """Accumulates the rewritten contents of one test file, in file order.

    The reader emits every line it consumes except expected blocks; the
    executor emits a fresh expected block for every directive. The result
    replaces the original file once the whole file has been processed."""

    def __init__(self):
        self._buf = StringIO()

    def emit(self, line: str):
        """Append line and a line terminator."""
        self._buf.write(line)
        self._buf.write("\n")

    def write(self, text: str):
        """Append text verbatim."""
        self._buf.write(text)

    def emit_expected(self, actual: str):
        """Append the expected-output section for actual, which is either empty
        or ends with a newline. Output containing a blank line is wrapped in
        double separators, so that the blank line is not read back as the end
        of the block."""
        self.emit(SEPARATOR)
        if has_blank_line(actual):
            self.emit(SEPARATOR)
            self.write(actual)
            self.emit(SEPARATOR)
            self.emit(SEPARATOR)
            # The reader consumes the blank line that follows the closing
            # separators; put it back.
            self.emit("")
        else:
            self.emit(actual)

    def getvalue(self) -> str:
        """The buffered contents, minus one trailing blank line if present."""
        data = self._buf.getvalue()
        if len(data) > 2 and data.endswith("\n\n"):
            data = data[:-1]
        return data

    def flush_to(self, dest: TextIO) -> str:
        """Replace the whole contents of dest with the buffer and sync it to
        disk. Returns what was written."""
        data = self.getvalue()
        dest.seek(0)
        dest.write(data)
        dest.truncate()
        dest.flush()
        os.fsync(dest.fileno())
        logger.debug(f"rewrote {getattr(dest, 'name', dest)} ({len(data)} characters)")
        return data

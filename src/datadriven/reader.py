"""Reader for the data-driven test file format.

    # comment
    <command> [arg | arg=val | arg=(val1, val2, ...)]...
    <input to the command>
    ----
    <expected results>

The input can contain blank lines. The expected results end at the first
blank line, unless the separator is doubled, in which case they may contain
blank lines and end at a doubled separator:

    <command> ...
    <input to the command>
    ----
    ----
    <expected results>

    <more expected results>
    ----
    ----

A directive line ending in a backslash continues on the next line.
"""

from typing import Optional, TextIO

from typing_extensions import Protocol, runtime_checkable

from datadriven._private.line_parser import ParseError, parse_line
from datadriven.rewrite import SEPARATOR, RewriteBuffer
from datadriven.testdata import TestData

SUBTEST = "subtest"


@runtime_checkable
class RecordSource(Protocol):
    """What the runner needs from a record stream."""

    data: TestData
    rewrite: Optional[RewriteBuffer]

    def next(self, case) -> bool:
        ...

    def emit(self, line: str) -> None:
        ...

    def fatal(self, case, message: str) -> None:
        """Fail case with message, prefixed with the current position."""
        ...


class _LineScanner:
    """Line-at-a-time scanner that keeps track of the current line number."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.line = 0
        self.text = ""

    def scan(self) -> bool:
        raw = self._stream.readline()
        if raw == "":
            return False
        self.line += 1
        if raw.endswith("\n"):
            raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
        self.text = raw
        return True


class TestDataReader:
    __test__ = False  # not a pytest test class

    def __init__(self, source_name: str, stream: TextIO, rewrite: bool = False):
        self.source_name = source_name
        self.scanner = _LineScanner(stream)
        self.data = TestData()
        self.rewrite: Optional[RewriteBuffer] = RewriteBuffer() if rewrite else None
        self._case = None

    def emit(self, line: str):
        if self.rewrite is not None:
            self.rewrite.emit(line)

    def fatal(self, case, message: str):
        self.data.fatalf(case, message)

    def next(self, case) -> bool:
        """Advance to the next directive. Returns False at end of input."""
        self._case = case
        # Keep the last position so that errors at EOF still point somewhere.
        self.data = TestData(pos=self.data.pos)
        scanner = self.scanner
        while scanner.scan():
            line = scanner.text
            self.emit(line)

            # Update pos early so that a late error message has it right.
            pos = f"{self.source_name}:{scanner.line}"
            self.data.pos = pos

            line = line.strip()
            if line.startswith("#"):
                continue
            while line.endswith("\\") and scanner.scan():
                next_line = scanner.text
                self.emit(next_line)
                line = line[:-1] + " " + next_line.strip()

            try:
                cmd, args = parse_line(line)
            except ParseError as e:
                self.fatal(case, str(e))
            if cmd == "":
                continue
            self.data.cmd = cmd
            self.data.cmd_args = args

            if cmd == SUBTEST:
                # Subtest markers have no input or expected output.
                return True

            lines, separator = [], False
            while scanner.scan():
                if scanner.text == SEPARATOR:
                    separator = True
                    break
                self.emit(scanner.text)
                lines.append(scanner.text + "\n")
            self.data.input = "".join(lines).strip()

            if separator:
                self._read_expected()
            return True
        return False

    def _read_expected(self):
        scanner = self.scanner
        lines = []
        line = ""
        allow_blank_lines = False
        if scanner.scan():
            line = scanner.text
            allow_blank_lines = line == SEPARATOR

        if allow_blank_lines:
            # Look for two successive separator lines.
            while scanner.scan():
                line = scanner.text
                if line == SEPARATOR and scanner.scan():
                    line2 = scanner.text
                    if line2 == SEPARATOR:
                        # Consume the blank line after the block so that a
                        # rewrite does not emit it twice.
                        if scanner.scan() and scanner.text != "":
                            self.fatal(self._case,
                                       "non-blank line after end of double ---- separator section")
                        break
                    lines.append(line + "\n")
                    line = line2
                lines.append(line + "\n")
        else:
            while line.strip() != "":
                lines.append(line + "\n")
                if not scanner.scan():
                    break
                line = scanner.text
        self.data.expected = "".join(lines)

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from datadriven.cmdarg import CmdArg, Dest


@dataclass
class TestData:
    """One data-driven test case, as parsed from the test file.

    For a directive such as

        cmd arg1=50 arg2=yoruba arg3=(50, 50, 50)

    the following are valid:

        d.scan_args(case, "arg1", Dest(int))
        d.scan_args(case, "arg2", Dest(str))
        d.scan_args(case, "arg3", Dest(int), Dest(int), Dest(int))
        a, b, c = d.scan_values(case, "arg3", int, int, int)
    """
    __test__ = False  # not a pytest test class

    pos: str = ""
    """file:line prefix of the directive, for logs and error messages"""
    cmd: str = ""
    """First token on the directive line"""
    cmd_args: List[CmdArg] = field(default_factory=list)
    """Arguments to the command, in declaration order"""
    input: str = ""
    """Text between the directive line and the ---- separator"""
    expected: str = ""
    """Text below the ---- separator. A handler may return it unchanged to
    signal that nothing changed."""

    def has_arg(self, key: str) -> bool:
        return any(arg.key == key for arg in self.cmd_args)

    def arg(self, key: str) -> Optional[CmdArg]:
        """The first argument named key, or None."""
        for arg in self.cmd_args:
            if arg.key == key:
                return arg
        return None

    def _lookup(self, case, key: str, n: int) -> CmdArg:
        arg = self.arg(key)
        if arg is None:
            case.fatal(f"missing argument: {key}")
        if n != len(arg.vals):
            case.fatal(f"{arg.key}: got {n} destinations, but {len(arg.vals)} values")
        return arg

    def scan_args(self, case, key: str, *dests: Dest):
        """Scan the first argument named key into dests, in order. A missing
        key, a destination count that differs from the value count, or a value
        that does not parse is fatal."""
        arg = self._lookup(case, key, len(dests))
        for i, dest in enumerate(dests):
            arg.scan(case, i, dest)

    def scan_values(self, case, key: str, *kinds) -> Tuple:
        """Like scan_args, but takes destination kinds and returns the values."""
        arg = self._lookup(case, key, len(kinds))
        return tuple(arg.convert(case, i, kind) for i, kind in enumerate(kinds))

    def fatalf(self, case, message: str):
        """Fail the case with message, prefixed with the directive position."""
        case.fatal(f"{self.pos}: {message}")

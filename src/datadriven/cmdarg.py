"""Typed arguments of a directive line.

An argument on the directive line is written in one of three forms:

    key
    key=value
    key=(value1, value2, ...)

and is represented by a :class:`CmdArg` holding the key and the ordered list
of values (zero, one or many). Values are scanned into typed destinations
with :meth:`CmdArg.scan`; the supported destination kinds are ``str``,
``int`` (signed 64-bit), :class:`uint64` and ``bool``. No coercion between
kinds is attempted: a value that does not parse as its destination kind is a
fatal error for the running case.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List


class uint64(int):
    """Destination kind for unsigned 64-bit integers."""


_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_BOOLS = {"1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
          "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False}


def _parse_int(val: str) -> int:
    if not _INT_RE.fullmatch(val):
        raise ValueError("invalid syntax")
    n = int(val)
    if not -(1 << 63) <= n < (1 << 63):
        raise ValueError("value out of range")
    return n


def _parse_uint64(val: str) -> uint64:
    if not _UINT_RE.fullmatch(val):
        raise ValueError("invalid syntax")
    n = int(val)
    if n >= (1 << 64):
        raise ValueError("value out of range")
    return uint64(n)


def _parse_bool(val: str) -> bool:
    if val not in _BOOLS:
        raise ValueError("invalid syntax")
    return _BOOLS[val]


CONVERTERS = {
    str: str,
    int: _parse_int,
    uint64: _parse_uint64,
    bool: _parse_bool,
}


class Dest:
    """A typed slot that :meth:`CmdArg.scan` fills in.

    >>> n = Dest(int)
    >>> d.scan_args(case, "rows", n)
    >>> n.value
    50
    """
    __slots__ = ['kind', 'value']

    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    def __repr__(self):
        return f"Dest({self.kind.__name__}, {self.value!r})"


@dataclass
class CmdArg:
    key: str
    vals: List[str] = field(default_factory=list)

    def __str__(self):
        if len(self.vals) == 0:
            return self.key
        if len(self.vals) == 1:
            return f"{self.key}={self.vals[0]}"
        return f"{self.key}=({', '.join(self.vals)})"

    @classmethod
    def parse(cls, text: str) -> 'CmdArg':
        """Parse a single argument in one of its three canonical forms."""
        from datadriven._private.line_parser import parse_line
        _, args = parse_line("_ " + text)
        if len(args) != 1:
            raise ValueError(f"expected exactly one argument, got {len(args)}: {text!r}")
        return args[0]

    def convert(self, case, i: int, kind) -> Any:
        """Convert the value at index i into kind, failing the case on error."""
        if i < 0 or i >= len(self.vals):
            case.fatal(f"cannot scan index {i} of key {self.key}")
        converter = CONVERTERS.get(kind)
        if converter is None:
            name = getattr(kind, '__name__', repr(kind))
            case.fatal(f"unsupported type {name} for destination #{i + 1} (might be easy to add it)")
        val = self.vals[i]
        try:
            return converter(val)
        except ValueError as e:
            case.fatal(f"{self.key}: cannot parse {val!r} as {kind.__name__} "
                       f"for destination #{i + 1}: {e}")

    def scan(self, case, i: int, dest: Dest):
        """Parse the value at index i into dest."""
        if not isinstance(dest, Dest):
            case.fatal(f"unsupported type {type(dest).__name__} for destination #{i + 1} "
                       f"(might be easy to add it)")
        dest.value = self.convert(case, i, dest.kind)

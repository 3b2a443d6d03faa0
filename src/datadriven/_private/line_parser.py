import re
from dataclasses import dataclass
from typing import List, Tuple

from datadriven.cmdarg import CmdArg


@dataclass
class ParseError(Exception):
    message: str
    column: int

    def __str__(self):
        return self.message


# One field of a directive line: a command or key, optionally followed by
# =value or =(value, value, ...).
_FIELD_RE = re.compile(r"^ *[-a-zA-Z0-9/_,.]+(|=[-a-zA-Z0-9_@=+/,.]*|=\([^)]*\))( |$)")


def split_directives(line: str) -> List[str]:
    """Split a directive line into its whitespace-separated fields, keeping
    parenthesized value lists together."""
    fields = []
    orig = line
    while line != "":
        m = _FIELD_RE.match(line)
        if m is None:
            column = len(orig) - len(line) + 1
            raise ParseError(f"cannot parse directive at column {column}: {orig}", column)
        fields.append(line[:m.end()].strip())
        line = line[m.end():]
    return fields


def parse_line(line: str) -> Tuple[str, List[CmdArg]]:
    """Parse a directive line into the command name and its arguments.
    An empty (or all-blank) line yields ('', [])."""
    fields = split_directives(line)
    if not fields:
        return "", []
    cmd, args = fields[0], []
    for field in fields[1:]:
        key, vals = field, []
        pos = field.find("=")
        if pos >= 0:
            key, val = field[:pos], field[pos + 1:]
            if len(val) > 2 and val[0] == "(" and val[-1] == ")":
                vals = [v.strip() for v in val[1:-1].split(",")]
            else:
                vals = [val]
        args.append(CmdArg(key, vals))
    return cmd, args

"""Running data-driven test files.

A handler interprets the commands of a test file. It is called once per
directive with the current case and the parsed :class:`TestData`, and returns
the actual output, which the runner compares with the expected output:

    def handler(case, d):
        if d.cmd == "echo":
            return d.input
        d.fatalf(case, f"unknown command {d.cmd}")

    run_test(case, "testdata/echo", handler)

To report an expected error, return its text as the output and put it in the
expected results. To report an unexpected one, call ``case.error()``; the
rest of the file is then not run.

Directives can be grouped into named subtests, which become child cases:

    subtest foo
    ...
    subtest foo/bar
    ...
    subtest end
    subtest end foo

The name of a nested subtest must begin with the name of the enclosing one
followed by a slash. Skipping from inside a subtest is not supported.
"""

import io
import logging
from typing import Callable, Optional, TextIO

from datadriven.case import Case, Skipped
from datadriven.config import Config
from datadriven.reader import SUBTEST, RecordSource, TestDataReader
from datadriven.testdata import TestData

logger = logging.getLogger(__file__)

SUBTEST_END = "end"

Handler = Callable[[Case, TestData], str]


def run_test(case: Case, path: str, handler: Handler, config: Optional[Config] = None):
    """Run the data-driven test file at path. In rewrite mode the file is
    replaced with the actual results once every directive has run."""
    try:
        f = open(path, "r+", encoding="utf-8", errors="surrogateescape", newline="\n")
    except OSError as e:
        case.fatal(str(e))
    with f:
        _run_test_internal(case, path, f, handler, config, dest=f)


def run_test_from_string(case: Case, text: str, handler: Handler, config: Optional[Config] = None):
    """Like run_test, with the contents of a test file given directly. In
    rewrite mode the rewritten contents are only logged."""
    _run_test_internal(case, "<string>", io.StringIO(text), handler, config)


def _run_test_internal(case: Case, source_name: str, stream: TextIO, handler: Handler,
                       config: Optional[Config], dest: Optional[TextIO] = None):
    if config is None:
        config = Config.from_env()
    reader = TestDataReader(source_name, stream, rewrite=config.rewrite)
    while reader.next(case):
        _run_directive_or_subtest(case, reader, "", handler, config)

    if reader.rewrite is not None:
        if dest is not None:
            try:
                reader.rewrite.flush_to(dest)
            except OSError as e:
                case.fatal(str(e))
        else:
            message = f"input is not a file; rewritten output is:\n{reader.rewrite.getvalue()}"
            logger.info(message)
            case.log(message)


def _run_directive_or_subtest(case: Case, reader: RecordSource, mandatory_prefix: str,
                              handler: Handler, config: Config):
    name = _subtest_start(case, reader, mandatory_prefix)
    if name is not None:
        _run_subtest(name, case, reader, handler, config)
    else:
        _run_directive(case, reader, handler, config)
    if case.failed():
        # Nothing after a failed directive can be trusted to start from a
        # consistent state; stop processing the file.
        case.fail_now()


def _run_subtest(name: str, case: Case, reader: RecordSource, handler: Handler, config: Config):
    start_pos = reader.data.pos
    seen_end = False
    seen_skip = False

    def body(sub: Case):
        nonlocal seen_end, seen_skip
        try:
            while reader.next(sub):
                if _subtest_end(sub, reader):
                    seen_end = True
                    args = reader.data.cmd_args
                    if len(args) == 2 and args[1].key != name:
                        reader.fatal(sub, f"mismatched subtest end directive: "
                                     f"expected {name!r}, got {args[1].key!r}")
                    return
                _run_directive_or_subtest(sub, reader, name + "/", handler, config)
        except Skipped:
            seen_skip = True
            raise

    case.run(name, body)

    if seen_skip:
        # Supporting this would mean reading on to the matching end while
        # ignoring the directives in between, and keeping the skipped text
        # unchanged in the rewrite buffer.
        reader.fatal(case, f"cannot use skip inside subtest\n{start_pos}: subtest started here")

    if not seen_end and not case.failed():
        # A failure stops the reading, so only report the missing end when
        # nothing else went wrong.
        reader.fatal(case, f"EOF encountered without subtest end directive\n"
                     f"{start_pos}: subtest started here")


def _subtest_start(case: Case, reader: RecordSource, mandatory_prefix: str) -> Optional[str]:
    """The name of the subtest that the current directive starts, or None if
    it is not a subtest start."""
    d = reader.data
    if d.cmd != SUBTEST:
        return None
    if len(d.cmd_args) != 1:
        reader.fatal(case, "invalid syntax for subtest")
    name = d.cmd_args[0].key
    if name == SUBTEST_END:
        reader.fatal(case, "subtest end without corresponding start")
    if not name.startswith(mandatory_prefix):
        reader.fatal(case, f"name of nested subtest must begin with {mandatory_prefix!r}")
    return name


def _subtest_end(case: Case, reader: RecordSource) -> bool:
    d = reader.data
    if d.cmd != SUBTEST:
        return False
    if len(d.cmd_args) == 0 or d.cmd_args[0].key != SUBTEST_END:
        return False
    if len(d.cmd_args) > 2:
        reader.fatal(case, "invalid syntax for subtest end")
    return True


def _run_directive(case: Case, reader: RecordSource, handler: Handler, config: Config):
    d = reader.data
    try:
        actual = handler(case, d)
    except BaseException:
        logger.error(f"panic during {d.pos}:\n{d.input}")
        raise

    if case.failed():
        # The handler reported an error; its output is not worth keeping and
        # writing it out would corrupt the expected results.
        case.fail_now()

    if not isinstance(actual, str):
        d.fatalf(case, f"handler returned {type(actual).__name__}, expected str")
    if actual != "" and not actual.endswith("\n"):
        actual += "\n"

    if reader.rewrite is not None:
        reader.rewrite.emit_expected(actual)
    elif d.expected != actual:
        case.fatal(f"\n{d.pos}: {d.input}\nexpected:\n{d.expected}\nfound:\n{actual}")
    elif config.verbose:
        text = d.input or "<no input to command>"
        case.log(f"\n{d.pos}:\n{d.cmd} [{len(d.cmd_args)} args]\n{text}\n----\n{actual}")

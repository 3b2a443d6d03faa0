"""A small hierarchy of named test cases.

Data-driven files nest: a directory walk opens one case per path segment and
every ``subtest`` group in a file opens one more. :class:`Case` is the node of
that hierarchy. It carries the outcome of its own body (failed, skipped) and
the log lines written against it. Fatal errors and skips are non-local and
travel as :class:`Aborted` and :class:`Skipped`, which :meth:`Case.run`
catches at the boundary of the child case that raised them.

To hook a run into unittest, use :func:`run_case`:

    class TestOptimizer(unittest.TestCase):
        def test_files(self):
            run_case(self, lambda case: walk(case, "testdata", run_file))
"""

import logging
from typing import Callable, List, Optional, cast

from datadriven._private import util

logger = logging.getLogger(__file__)


class CaseExit(BaseException):
    """Base of the non-local exits of a case body."""

    def __init__(self, case: 'Case'):
        super().__init__(case.full_name)
        self.case = case


class Aborted(CaseExit):
    """Raised by fail_now/fatal: the rest of the case body does not run."""


class Skipped(CaseExit):
    """Raised by skip: the rest of the case body does not run."""


class Case:

    def __init__(self, name: str = "", parent: Optional['Case'] = None):
        self.name = name
        self.parent = parent
        """Back-reference to the enclosing case; parents own their children."""
        self.children: List['Case'] = []
        self.output: List[str] = []
        """Messages logged against this case, in order"""
        self._failed = False
        self._skipped = False

    def __repr__(self):
        return f"Case({self.full_name!r}, status={self.status})"

    @property
    def full_name(self) -> str:
        """Names from the root down to this case, joined with '/'. The root
        name is left out when it is empty."""
        names = []
        case = self
        while case is not None:
            if case.name:
                names.append(case.name)
            case = case.parent
        return "/".join(reversed(names))

    @property
    def status(self) -> str:
        if self._failed:
            return "fail"
        if self._skipped:
            return "skip"
        return "pass"

    # ==================
    # Host primitives
    # ==================

    def log(self, message: str):
        self.output.append(message)
        logger.info(f"{self.full_name or '<root>'}: {message}")

    def fail(self):
        """Mark the case failed but keep running."""
        self._failed = True

    def error(self, message: str):
        """Log message and mark the case failed but keep running."""
        self.log(message)
        self.fail()

    def fail_now(self):
        """Mark the case failed and stop running its body."""
        self._failed = True
        raise Aborted(self)

    def fatal(self, message: str):
        """Log message, mark the case failed and stop running its body."""
        self.log(message)
        self.fail_now()

    def skip(self, message: str = ""):
        """Mark the case skipped and stop running its body."""
        if message:
            self.log(message)
        self._skipped = True
        raise Skipped(self)

    def failed(self) -> bool:
        return self._failed

    def skipped(self) -> bool:
        return self._skipped

    def run(self, name: str, body: Callable[['Case'], None]) -> bool:
        """Run body as a new child case named name. Returns True unless the
        child failed; a failed child also marks this case failed."""
        child = Case(name, parent=self)
        self.children.append(child)
        try:
            body(child)
        except Skipped:
            child._skipped = True
        except Aborted:
            child._failed = True
        if child.failed():
            self._failed = True
        return not child.failed()

    # ==================
    # Reporting
    # ==================

    def walk(self):
        """Yield this case and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def report(self) -> str:
        """Go-style summary of failed and skipped cases with their log lines."""
        lines = []
        for case in self.walk():
            if case.status == "pass" or (case.status == "fail" and not case.output and case.children):
                continue
            lines.append(f"--- {case.status.upper()}: {case.full_name or '<root>'}")
            for message in case.output:
                lines.extend("    " + line for line in message.split("\n"))
        return "\n".join(lines)

    def view(self) -> 'graphviz.Digraph':
        """Creates a 'graphviz.Digraph' object of the case hierarchy, one node per
        case, coloured by outcome. Will automatically display in Jupyter."""
        import graphviz
        if not util.check_graphviz_installed():
            raise EnvironmentError("Graphviz executable not found. Please install [Graphviz](https://www.graphviz.org/download/). On macOS, use `brew install graphviz`.")

        colors = {"pass": "palegreen", "fail": "lightcoral", "skip": "lightgrey"}
        g = graphviz.Digraph('Cases', graph_attr={"rankdir": "LR"})
        g.attr('node', shape='box', style='filled')
        ids = {}
        for case in self.walk():
            ids[id(case)] = str(len(ids))
            g.node(ids[id(case)], graphviz.nohtml(case.name or '<root>'), fillcolor=colors[case.status])
            if case is not self:
                g.edge(ids[id(case.parent)], ids[id(case)])
        return g

    def render(self, view=True, filename: str = 'cases', format='pdf', tight=True):
        """
        Renders the case hierarchy to a file and optionally opens the file.
        :param view: If True, the rendered file will be opened.
        :param format: The file format for the Digraph. Typically 'pdf', 'png', or 'svg'.
        :param tight: If False, the rendered file will have whitespace margins around the graph.
        """
        import graphviz
        digraph = cast(graphviz.Digraph, self.view())
        digraph.format = format
        if tight:
            digraph.graph_attr['margin'] = '0'
        digraph.render(view=view, filename=filename, cleanup=True)


def run_case(testcase, body: Callable[[Case], None], name: str = "") -> Case:
    """Run body against a fresh root case and report its outcome to a
    unittest.TestCase: a failure anywhere in the hierarchy fails testcase with
    the full report, a skipped root skips it."""
    root = Case(name)
    try:
        body(root)
    except Skipped:
        root._skipped = True
    except Aborted:
        root._failed = True
    if root.failed():
        testcase.fail("\n" + root.report())
    elif root.skipped():
        testcase.skipTest(root.output[-1] if root.output else "skipped")
    return root

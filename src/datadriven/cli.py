"""
datadriven: run data-driven test files against a handler function.

Usage:
  datadriven mypkg.tests:handler testdata/
  datadriven --rewrite mypkg.tests:handler testdata/optimizer
  datadriven -v --graph cases.pdf mypkg.tests:handler testdata/
"""

import argparse
import importlib
import logging
import os
import sys
from typing import List, Optional

from tqdm import tqdm

from datadriven.case import Case
from datadriven.config import Config
from datadriven.runner import Handler, run_test
from datadriven.walk import walk


def load_handler(spec: str) -> Handler:
    """Resolve 'package.module:function' to the function."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"handler must be given as module:function, got {spec!r}")
    module = importlib.import_module(module_name)
    obj = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise ValueError(f"{spec} is not callable")
    return obj


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="datadriven", description="Run data-driven test files.")
    ap.add_argument("handler", help="handler function, as package.module:function")
    ap.add_argument("paths", nargs="+", help="test files or directories of test files")
    ap.add_argument("--rewrite", action="store_true",
                    help="ignore the expected results and rewrite the test files with the actual "
                         "results of this run; verify the diffs carefully!")
    ap.add_argument("-v", "--verbose", action="store_true", help="log every directive that passes")
    ap.add_argument("--no-progress", action="store_true", help="do not show a progress counter")
    ap.add_argument("--graph", metavar="FILE", help="render the case hierarchy to FILE with graphviz")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(message)s")

    # Run from the current directory, like a test runner would.
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        handler = load_handler(args.handler)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"datadriven: {e}", file=sys.stderr)
        return 2

    config = Config(rewrite=args.rewrite, verbose=args.verbose)
    root = Case()
    with tqdm(desc="datadriven", unit="file", disable=args.verbose or args.no_progress) as progress:
        def run_file(case: Case, path: str):
            try:
                run_test(case, path, handler, config)
            finally:
                progress.update(1)

        for path in args.paths:
            def walk_path(case: Case, path=path):
                walk(case, path, run_file)
            # Each path gets its own case, so that a fatal error in one does
            # not stop the others.
            root.run(path, walk_path)

    if args.graph:
        stem, ext = os.path.splitext(args.graph)
        root.render(view=False, filename=stem, format=ext.lstrip(".") or "pdf")

    report = root.report()
    if report:
        print(report)
    if root.failed():
        print("FAIL")
        return 1
    print("ok")
    return 0

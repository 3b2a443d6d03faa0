import os
import re
import stat
from typing import Callable

from datadriven.case import Case

# Files named .XXX, XXX~ or #XXX# are temporary or hidden; never process them.
TEMP_FILE_RE = re.compile(r"(^\..*)|(.*~$)|(^#.*#$)")


def walk(case: Case, path: str, func: Callable[[Case, str], None]):
    """Run func on every file under path, in a hierarchy of child cases that
    mirrors the directory hierarchy. Given

        testdata/typing
        testdata/logprops/scan
        testdata/logprops/select

    walking "testdata/typing" calls func once, on case itself; walking
    "testdata/logprops" calls it twice, in child cases scan and select;
    walking "testdata" calls it three times, in cases typing, logprops/scan
    and logprops/select.

    Typically func runs the file with run_test:

        def run_file(case, path):
            catalog = Catalog()
            run_test(case, path, lambda case, d: catalog.execute(case, d))

        walk(case, "testdata", run_file)
    """
    try:
        info = os.stat(path)
    except OSError as e:
        case.fatal(str(e))
    if not stat.S_ISDIR(info.st_mode):
        func(case, path)
        return
    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        case.fatal(str(e))
    for name in names:
        if TEMP_FILE_RE.match(name):
            continue
        child_path = os.path.join(path, name)
        case.run(name, lambda sub, child_path=child_path: walk(sub, child_path, func))

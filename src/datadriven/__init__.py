from datadriven.case import Case, Aborted, Skipped, run_case
from datadriven.cmdarg import CmdArg, Dest, uint64
from datadriven.config import Config
from datadriven.runner import run_test, run_test_from_string
from datadriven.testdata import TestData
from datadriven.walk import walk

__license__    = "Apache"
__version__    = "1.0"
__status__     = "Prototype"

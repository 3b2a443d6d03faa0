import os
from dataclasses import dataclass
from typing import Mapping, Optional

from datadriven._private.util import is_truthy

REWRITE_ENV = "DATADRIVEN_REWRITE"
VERBOSE_ENV = "DATADRIVEN_VERBOSE"


@dataclass(frozen=True)
class Config:
    """Settings for one run of data-driven files.

    rewrite -- ignore the expected results and rewrite the test files with the
               actual results of this run. Used to update tests when a change
               affects many cases; verify the resulting diffs carefully!
    verbose -- log every directive that passes, with its input and output
    """
    rewrite: bool = False
    verbose: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """Read the settings from DATADRIVEN_REWRITE and DATADRIVEN_VERBOSE,
        for runs under a test runner that has no flags of its own."""
        if environ is None:
            environ = os.environ
        return cls(rewrite=is_truthy(environ.get(REWRITE_ENV)),
                   verbose=is_truthy(environ.get(VERBOSE_ENV)))

import sys

from datadriven.cli import main

sys.exit(main())

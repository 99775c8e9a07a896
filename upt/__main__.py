import sys

from upt.cli import main

sys.exit(main())

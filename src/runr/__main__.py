import sys

from runr.cli import main

sys.exit(main())

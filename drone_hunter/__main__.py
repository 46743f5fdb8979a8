import sys

from drone_hunter.cli import main

sys.exit(main())

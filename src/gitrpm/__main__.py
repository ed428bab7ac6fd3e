import sys

from gitrpm.cli import main

sys.exit(main())

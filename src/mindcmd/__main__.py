import sys

from mindcmd.cli import main

sys.exit(main())

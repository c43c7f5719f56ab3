import sys

from pbitutility.cli import main

sys.exit(main())

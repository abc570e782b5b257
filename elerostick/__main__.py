import sys

from elerostick.cli import main

sys.exit(main())

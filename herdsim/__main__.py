import sys

from herdsim.cli import main

sys.exit(main())

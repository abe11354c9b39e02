import sys

from numengine.cli import main

sys.exit(main())

# Entry point for python -m ccgear
import sys

from ccgear.cli import main

sys.exit(main())

import sys

from chordwatch.cli import main

sys.exit(main())

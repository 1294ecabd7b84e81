import sys

from notable_organizer.cli import main

sys.exit(main())

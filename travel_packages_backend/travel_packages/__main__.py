import sys

from travel_packages.cli import main

sys.exit(main())

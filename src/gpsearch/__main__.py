import sys

from gpsearch.cli import main

sys.exit(main())

import sys

from link_monitor.cli import main

sys.exit(main())

import sys

from plate_reader.cli import main

sys.exit(main())

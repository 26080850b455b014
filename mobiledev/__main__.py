import sys

from mobiledev.cli.main import main

sys.exit(main())

"""Allow ``python -m buildcache.cli`` execution."""

import sys

from buildcache.cli.app import main

sys.exit(main())

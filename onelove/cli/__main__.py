"""Allow ``python -m onelove.cli`` execution."""

import sys

from onelove.cli.admin import main

sys.exit(main())

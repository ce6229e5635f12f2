# Entry point for `python -m mcpadd`
import sys

from mcpadd.cli import main

sys.exit(main())

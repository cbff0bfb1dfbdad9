"""Allow running as ``python -m urlhealth``."""

from . import main

main()

"""Allow ``python -m filemove``."""

from .cli import main

main()

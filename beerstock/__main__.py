"""Allow ``python -m beerstock``."""

from beerstock.cli import main

main()

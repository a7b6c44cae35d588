import sys

from ace_it.cli import main

if __name__ == "__main__":
    sys.exit(main())

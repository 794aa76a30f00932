import sys

from airfoil_atlas.cli import main

if __name__ == "__main__":
    sys.exit(main())

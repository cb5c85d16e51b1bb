import sys

from mhealthgen.app import main

if __name__ == "__main__":
    sys.exit(main())

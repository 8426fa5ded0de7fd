import sys

from estester.dataset import main

if __name__ == "__main__":
    sys.exit(main())

import sys

from security_tracker.runner import main


if __name__ == "__main__":
    sys.exit(main())

"""
Main entry point for portscout.
"""
import sys

from portscout.app import main

if __name__ == "__main__":
    sys.exit(main())

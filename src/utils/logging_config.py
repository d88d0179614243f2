"""Simple logging setup - send all logs to stderr so generated output stays clean."""

import logging
import sys


def setup_logging(verbose: bool = False, debug: bool = False):
    """Setup logging to stderr. WARNING by default, INFO when verbose, DEBUG when debugging."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)

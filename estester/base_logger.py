"""
Logging for estester. Progress of index population goes to stdout, failures to
stderr, so a CI job that seeds the read index before the connector tests keeps the
two apart. Set LOGLEVEL=INFO to hide per-batch progress.
"""

import logging
import os
import sys

LOGLEVEL = os.environ.get("LOGLEVEL", "DEBUG").upper()

# Debug and Info go to stdout, everything above to stderr
stdout_handler = logging.StreamHandler(sys.stdout)
stdout_handler.setLevel(logging.DEBUG)
stdout_handler.addFilter(lambda record: record.levelno <= logging.INFO)
stderr_handler = logging.StreamHandler(sys.stderr)
stderr_handler.setLevel(logging.WARNING)

formatter = logging.Formatter("%(levelname)-8s %(asctime)s [%(module)s]  %(message)s")
stdout_handler.setFormatter(formatter)
stderr_handler.setFormatter(formatter)

logger = logging.getLogger("estester")
logger.setLevel(LOGLEVEL)
logger.propagate = False
logger.addHandler(stdout_handler)
logger.addHandler(stderr_handler)

"""Console and file logging for the command line tools.

Library modules only create ``logging.getLogger(__name__)`` loggers and
never configure output; hosts embedding curvemesh keep control of that.
"""

import logging
import sys
from typing import List, Optional, TextIO

# handlers installed by setup_logging, replaced on each call
_installed: List[logging.Handler] = []

CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """Route the ``curvemesh`` loggers to ``stream`` (stderr by default).

    Only warnings reach the console unless ``verbose`` is set, in which
    case the per-part DEBUG lines of the builders show up too.  A
    ``log_file`` always receives DEBUG output.  Calling this again swaps
    the previous handlers out rather than stacking new ones.
    """
    logger = logging.getLogger("curvemesh")
    for handler in _installed:
        logger.removeHandler(handler)
        handler.close()
    _installed.clear()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    _installed.append(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%H:%M:%S'))
        _installed.append(file_handler)

    for handler in _installed:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose or log_file else logging.WARNING)
    return logger

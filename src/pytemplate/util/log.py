import logging
import sys


LOGGER_NAME = "pytemplate"

# 2009/11/10 23:00:00 message
FORMAT = "%(asctime)s %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def get_logger(verbose=False, stream=None):
    """
    Returns the logger the instantiation pipeline reports to.

    The logger is handed to every pipeline stage explicitly; verbose only
    changes how much of the intermediate state (names, declarations, mappings)
    gets logged, never what gets generated.
    """
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr if stream is None else stream)
        handler.setFormatter(logging.Formatter(FORMAT, DATE_FORMAT))
        log.addHandler(handler)
        log.propagate = False
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    return log

"""
Logging utilities for pgtools.
"""

import sys
import logging

def setup_logging(debug=False, log_file=None, verbose=False, stream=None):
    """
    Configure the root logger.

    Log records go to stderr by default so that command output on stdout
    stays machine readable (e.g. JSON).
    """
    if debug:
        log_level = logging.DEBUG
        log_format = '%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
    elif verbose:
        log_level = logging.INFO
        log_format = '%(asctime)s - %(levelname)s - %(message)s'
    else:
        log_level = logging.WARNING
        log_format = '%(levelname)s: %(message)s'

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear any existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'))
        logger.addHandler(file_handler)
        if not debug:
            logger.setLevel(logging.INFO)

    return logger

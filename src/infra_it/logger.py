import logging
import os
import sys
import traceback

from colorlog import ColoredFormatter

from . import constants as CONSTANTS

LOGGER_NAME = "infra_it"


def setup_logger(debug_mode=False):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Create console handler
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Create colored formatter
    formatter = ColoredFormatter(
        "%(log_color)s[%(levelname)s] %(name)s: %(message)s",
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "red,bg_white",
        }
    )
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)
    else:
        for existing in logger.handlers:
            existing.setLevel(logger.level)

    return logger


def get_debug_mode():
    return os.environ.get(CONSTANTS.DEBUG_ENV_VAR, "").lower() in ("1", "true", "debug")


def print_stack_trace():
    """
    Log the current exception's stack trace if debug mode is enabled.
    """
    if get_debug_mode():
        logger.error(traceback.format_exc())


# Logger defaults to INFO unless INFRA_IT_DEBUG is set.
DEBUG_MODE = get_debug_mode()
logger = setup_logger(debug_mode=DEBUG_MODE)

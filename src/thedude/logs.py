"""Logging configuration"""

import logging

import coloredlogs

from .config_classes import LoggingConfig


def configure_logging(verbose=False, very_verbose=False):
    """Configure the logging module for the thedude loggers"""
    if very_verbose:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        return  # no logs

    coloredlogs.install(
        fmt="[%(asctime)s.%(msecs)03d] %(name)-18s %(message)s",
        datefmt="%H:%M:%S",
        level=level,
        logger=logging.getLogger("thedude"),
    )


def configure_from(config: LoggingConfig):
    configure_logging(verbose=config.verbose, very_verbose=config.very_verbose)

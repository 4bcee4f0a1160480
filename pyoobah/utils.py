import logging

import numpy as np
import pandas as pd

LOGGER_NAME = 'pyoobah'


def get_logger(level: str | int | None = None) -> logging.Logger:
    """Return the package logger. A stream handler is attached the first time the function is called.

    :param level: logging level to set. Default: None (keeps the current level, INFO on first call)
    :type level: str | int | None

    :return: the package logger
    :rtype: logging.Logger"""
    logger = logging.getLogger(LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    if level is not None:
        logger.setLevel(level)

    return logger


def set_logger(level: str | int) -> None:
    """Change the logging level of the package, e.g. 'DEBUG', 'INFO', 'WARNING'

    :param level: new logging level
    :type level: str | int

    :return: None"""
    get_logger(level)


def get_total_intensity(df: pd.DataFrame, channel: str, remove_na: bool = False) -> np.ndarray:
    """Sum the methylated and unmethylated signal of one channel (columns `M<channel>` and `U<channel>`) and return the
    values as a flat array. If `remove_na` is set to True, probes with a missing value are removed"""
    values = (df[f'M{channel}'] + df[f'U{channel}']).to_numpy(dtype='float64')
    if remove_na:
        return values[~np.isnan(values)]
    return values


def is_real_number(value) -> bool:
    """Check that the value is a real number. Booleans are not accepted."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))

import logging
import os
from logging import Formatter, FileHandler, StreamHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """
    Logger with console output and, when LOG_FILE is set, a file copy
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)

    file_formatter = Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_formatter = Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")

    log_file = os.getenv("LOG_FILE")
    if log_file:
        file_handler = FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    stream_handler = StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(console_formatter)
    logger.addHandler(stream_handler)

    return logger

import logging
import logging.handlers
import os


default_formatter = logging.Formatter(
    "{time:\"%(asctime)s\","
    "level:\"%(levelname)s\","
    "filename:\"%(filename)s\","
    "function:\"%(funcName)s\","
    "lineno:%(lineno)d,"
    "msg:\"%(message)s\"}"
)

LOG_PATH = os.environ.get("BANKREADER_LOG", "log.txt")

default_file_handler = logging.handlers.RotatingFileHandler(
    LOG_PATH, backupCount=2, delay=True
)
default_file_handler.setLevel(logging.INFO)
default_file_handler.setFormatter(default_formatter)

default_stream_handler = logging.StreamHandler()
default_stream_handler.setLevel(logging.ERROR)
default_stream_handler.setFormatter(default_formatter)


def get_logger():
    logger: logging.Logger | None = None

    def _get_logger():
        nonlocal logger
        if logger != None:
            return logger

        logger = logging.getLogger("bank_reader")
        logger.setLevel(logging.INFO)

        logger.addHandler(default_file_handler)
        logger.addHandler(default_stream_handler)

        return logger

    return _get_logger


logger = get_logger()()


def set_log_level(level: int | str):
    logger.setLevel(level)
    default_file_handler.setLevel(level)


def enable_verbose_mode():
    """
    Mirror everything the file handler receives onto stderr.
    """
    default_stream_handler.setLevel(logging.DEBUG)

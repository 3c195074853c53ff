import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-12s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the root "app" logger with a console handler.

    Safe to call more than once: handlers are only attached the first time.
    """
    logger = logging.getLogger("app")
    logger.setLevel(level.upper())

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)
    return logger

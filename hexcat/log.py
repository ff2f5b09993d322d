import logging
from typing import Optional

from . import config

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(path: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    # stdout belongs to the UI, so logs only ever go to a file
    logger = logging.getLogger("hexcat")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    path = path if path is not None else config.LOG_FILE
    if path:
        fh = logging.FileHandler(path)
        fh.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(fh)
    else:
        logger.addHandler(logging.NullHandler())
    logger.setLevel(getattr(logging, level or config.LOG_LEVEL, logging.INFO))
    logger.propagate = False
    return logger

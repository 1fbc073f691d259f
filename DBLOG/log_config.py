import logging
import os

from DBLOG.config import Settings

LOG_FILE_NAME = "dblog.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings) -> str:
    """Send DBLOG's own diagnostics to <log_dir>/dblog.log and return that path"""
    if not os.path.exists(settings.log_dir):
        os.makedirs(settings.log_dir)

    log_path = os.path.join(settings.log_dir, LOG_FILE_NAME)
    logging.basicConfig(
        filename=log_path,
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    return log_path

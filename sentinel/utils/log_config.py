import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    """
    Apply LOG_LEVEL and attach a rotating LOG_FILE handler.
    app.logger is the "sentinel" logger, so module loggers under the package propagate to it.
    """
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)

    log_file = app.config.get("LOG_FILE")
    if not log_file or app.testing:
        return

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    app.logger.addHandler(handler)
